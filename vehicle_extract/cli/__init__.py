from .__main__ import EXIT_FATAL, EXIT_NO_DATA, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS, main

__all__ = [
    "EXIT_FATAL",
    "EXIT_NO_DATA",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_SUCCESS",
    "main",
]
