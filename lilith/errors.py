class LilithError(Exception):
    """ Base class for host-level Lilith errors.

    Errors raised by Lilith programs are ordinary Error values; these
    exceptions only signal failures of the machinery around the evaluator.
    """
    pass

class LilithSyntaxError(LilithError):
    """ Raised when source text cannot be read"""

class LilithBootstrapError(LilithError):
    """ Raised when the prelude fails to evaluate during start-up"""
