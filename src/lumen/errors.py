## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class LumenError(Exception):
    def __init__(self, message: str = "", *, lumen_node=None, lumen_token=None, lumen_meta=None):
        """Base class for all Lumen-raised errors."""
        super().__init__(message)
        self.lumen_node: object = lumen_node
        self.lumen_token: str = lumen_token
        self.lumen_meta: dict = lumen_meta

class LumenParseError(LumenError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None, expected=None):
        super().__init__(message, lumen_token=token, lumen_meta={'filename': filename, 'line': line, 'column': column})
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token
        self.expected = expected

class LumenIncompleteParse(LumenParseError):
    """Source ended inside an unfinished construct; more input could complete it."""
    pass


class LumenTypeError(LumenError, TypeError):
    """Operand kinds not accepted by an operator or statement."""
    pass

class LumenAssignmentError(LumenError, TypeError):
    """Left-hand side of an assignment is not an identifier."""
    pass

class LumenUnsupportedFeature(LumenError, NotImplementedError):
    pass

class LumenRecursionError(LumenError, RecursionError):
    pass


class LumenExit(SystemExit):
    """Raised by a `return` statement to end the program with an exit status."""
    def __init__(self, status: int, value=None):
        super().__init__(status)
        self.status = status
        self.value = value
