"""
Synacor VM - Exception Types

  SynacorError   base class for everything this package raises
  MachineFault   an instruction could not be executed; the machine
                 turns it into the terminal Error run state
  LoaderError    a program file could not be read or is not a program
"""


class SynacorError(Exception):
    """Base class for Synacor VM errors."""
    pass


class MachineFault(SynacorError):
    """Raised by instruction handlers when execution cannot continue."""
    pass


class LoaderError(SynacorError):
    """Raised when a program binary cannot be loaded."""
    pass
