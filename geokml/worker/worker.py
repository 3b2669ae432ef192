import threading
import time

from geokml.config.settings import Settings
from geokml.database.models import JobRecord
from geokml.database.repositories.job_repository import JobRepository
from geokml.logging.logger import Log
from geokml.worker.job_runner import JobRunner
from geokml.worker.wake_signal import WakeSignal


class Worker:
    """Single consumer loop: fetch oldest pending -> run -> repeat.

    When the queue is empty the loop parks on the wake signal, with a short
    timeout so that a lost wake only delays a job until the next poll.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        wake_signal: WakeSignal,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._wake_signal = wake_signal
        self._settings = settings
        self._stop_requested = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Run the loop in a dedicated background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_requested.clear()
        self._thread = threading.Thread(target=self.run, name="geokml-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask the loop to exit once the current job (if any) is finished."""
        self._stop_requested.set()
        self._wake_signal.send()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self, max_jobs: int | None = None) -> None:
        """Main loop. Runs until stop() or an interrupt.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, waiting for jobs")
        jobs_done = 0
        try:
            while not self._stop_requested.is_set():
                if max_jobs is not None and jobs_done >= max_jobs:
                    break
                try:
                    job = self._job_repo.find_next_pending()
                    if job is None:
                        self._wait_for_wake()
                        continue
                    self._dispatch(job)
                    jobs_done += 1
                except Exception as exc:
                    Log.error(f"Worker loop error, backing off: {exc}")
                    time.sleep(self._settings.worker_error_backoff_seconds)
        except KeyboardInterrupt:
            Log.info("Worker interrupted")
        Log.info("Worker stopped")

    def _wait_for_wake(self) -> None:
        woken = self._wake_signal.wait(self._settings.worker_poll_timeout_seconds)
        if not woken:
            Log.debug("No jobs available, polling again")

    def _dispatch(self, job: JobRecord) -> None:
        Log.debug("Dispatching job", job_id=job.id)
        self._job_runner.run(job)
