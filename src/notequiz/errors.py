"""Exception types raised by the quiz engine."""


class NoteQuizError(Exception):
    """Base class for errors surfaced to the front-end."""


class StorageError(NoteQuizError):
    """The persistence collaborator failed to read or write a key."""


class InvalidTransition(NoteQuizError):
    """A quiz session event was sent in a state that does not accept it."""
