"""Ctrl-C handling for code that waits on child processes.

Only the main thread receives KeyboardInterrupt from the OS. When a run is
interrupted while another thread (for example one constructing a Build for
the registry) is waiting on mach or a compiler, the main thread has to be
told as well.
"""

import _thread
import threading
from typing import NoReturn


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> NoReturn:
    """Re-raise an interrupt, forwarding it to the main thread from workers.

    In the main thread the interrupt is simply re-raised, so no second
    KeyboardInterrupt is queued behind it.

    Usage:
        try:
            stdout, stderr = proc.communicate()
        except KeyboardInterrupt as ke:
            _kill_process_tree(proc.pid)
            handle_keyboard_interrupt_properly(ke)

    Raises:
        KeyboardInterrupt: Always
    """
    if threading.current_thread() is not threading.main_thread():
        _thread.interrupt_main()
    raise ke
