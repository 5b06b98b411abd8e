"""Building blocks behind :mod:`focuslog.logger_setup`."""
