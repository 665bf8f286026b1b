import os
import stat
import queue
import signal
import logging
import subprocess
import threading
from typing import Dict, List, Optional
from oci_add_hooks.utils.constants import EXIT_CODE_FAILURE, EXIT_CODE_SUCCESS, SIGNAL_EXIT_CODE_BASE
from oci_add_hooks.utils.errors import ChildSpawnError, ChildWaitError, RuntimeNotFoundError
from oci_add_hooks.utils.logging import logger as default_logger

# SIGKILL and SIGSTOP cannot be caught. SIGCHLD reports our own child exiting.
# Synchronous faults must keep their default action so the wrapper crashes.
UNRELAYED_SIGNALS = {
    signal.SIGKILL, signal.SIGSTOP, signal.SIGCHLD,
    signal.SIGSEGV, signal.SIGBUS, signal.SIGFPE, signal.SIGILL,
}

def relayable_signals() -> List[int]:
    """Signals the wrapper observes and passes on to the runtime."""
    return sorted(sig for sig in signal.valid_signals() if sig not in UNRELAYED_SIGNALS)

def verify_runtime_path(runtime_path: str) -> str:
    """
    Check that runtime_path names an existing regular file.

    Raises:
        RuntimeNotFoundError: If the path is missing, a directory or not a regular file
    """
    try:
        mode = os.stat(runtime_path).st_mode
    except OSError as e:
        raise RuntimeNotFoundError(f"unable to find runtime {runtime_path}: {e}") from e
    if stat.S_ISDIR(mode) or not stat.S_ISREG(mode):
        raise RuntimeNotFoundError(f"unable to find runtime {runtime_path}: not a regular file")
    return runtime_path

def exit_code_from_returncode(returncode: int) -> int:
    """Map a Popen returncode to the exit code a shell would report for the same child."""
    if returncode < 0:
        return SIGNAL_EXIT_CODE_BASE - returncode
    return returncode


class SignalRelay:
    """
    Forwards every signal this process receives to a child process.

    Handlers are installed on entering the context, so signals arriving
    before the child exists are queued and delivered once start() is called.
    Leaving the context restores the previous handlers and joins the relay
    thread. Signals are never dropped and are delivered in arrival order.

    Must be entered from the main thread.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or default_logger
        self._signals = queue.SimpleQueue()
        self._previous_handlers: Dict[int, object] = {}
        self._thread: Optional[threading.Thread] = None
        self._process: Optional[subprocess.Popen] = None

    def _enqueue(self, signum, frame):
        # SimpleQueue.put is reentrant, safe to call from a signal handler
        self._signals.put(signum)

    def install(self) -> None:
        for sig in relayable_signals():
            try:
                self._previous_handlers[sig] = signal.signal(sig, self._enqueue)
            except (OSError, ValueError) as e:
                # Signals reserved by the C library cannot be handled
                self.logger.debug("Not relaying signal %d: %s", sig, e)
        self.logger.debug("Relaying %d signals", len(self._previous_handlers))

    def restore(self) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers = {}

    def start(self, process: subprocess.Popen) -> None:
        """Begin delivering queued and future signals to process."""
        self._process = process
        self._thread = threading.Thread(target=self._relay, name="signal-relay")
        # The relay thread inherits a mask blocking every relayed signal, so the
        # kernel delivers them to the main thread where Python runs handlers.
        previous_mask = signal.pthread_sigmask(signal.SIG_BLOCK, self._previous_handlers.keys())
        try:
            self._thread.start()
        finally:
            signal.pthread_sigmask(signal.SIG_SETMASK, previous_mask)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._signals.put(None)
        self._thread.join()
        self._thread = None

    def _relay(self):
        while True:
            signum = self._signals.get()
            if signum is None:
                return
            self.logger.info("Forwarding signal %d to runtime pid %d", signum, self._process.pid)
            try:
                self._process.send_signal(signum)
            except ProcessLookupError:
                self.logger.debug("Runtime pid %d already exited", self._process.pid)

    def __enter__(self):
        self.install()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.restore()
        self.stop()
        return False


class ProcessSupervisor:
    """Runs the container runtime in the foreground and mirrors its exit status."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or default_logger

    def _spawn(self, runtime_path: str, args: List[str]) -> subprocess.Popen:
        try:
            # stdin, stdout and stderr are inherited unchanged
            return subprocess.Popen([runtime_path] + list(args))
        except OSError as e:
            raise ChildSpawnError(f"runtime start failed: {e}") from e

    def _wait(self, process: subprocess.Popen) -> int:
        try:
            return process.wait()
        except OSError as e:
            raise ChildWaitError(f"failed to wait for runtime pid {process.pid}: {e}") from e

    def launch(self, runtime_path: str, args: List[str]) -> int:
        """
        Run the runtime with args and wait for it to exit.

        Args:
            runtime_path: Path to the runtime executable
            args: Arguments passed to the runtime unchanged

        Returns:
            int: The runtime's exit code, 128 + N if it was killed by signal N,
            or 1 if it could not be started or waited on

        Raises:
            RuntimeNotFoundError: If runtime_path is not a regular file
        """
        verify_runtime_path(runtime_path)
        self.logger.info("Executing command: %s", " ".join([runtime_path] + list(args)))

        try:
            # Register for signals before spawning so none are missed
            with SignalRelay(self.logger) as relay:
                process = self._spawn(runtime_path, args)
                self.logger.info("Running runtime with pid %d", process.pid)
                relay.start(process)
                returncode = self._wait(process)
        except (ChildSpawnError, ChildWaitError) as e:
            self.logger.error("Error: %s", e)
            return EXIT_CODE_FAILURE

        exit_code = exit_code_from_returncode(returncode)
        if exit_code == EXIT_CODE_SUCCESS:
            self.logger.info("Runtime exited successfully")
        else:
            self.logger.warning("Runtime exited with code %d", exit_code)
        return exit_code


def launch(runtime_path: str, args: List[str], logger: Optional[logging.Logger] = None) -> int:
    """Launch the runtime with a fresh ProcessSupervisor."""
    return ProcessSupervisor(logger).launch(runtime_path, args)
