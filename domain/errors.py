"""Domain errors — pure Python, zero external dependencies."""


class RecordStoreError(Exception):
    """The record store could not complete an I/O operation."""


class RecordNotFoundError(RecordStoreError):
    """A record required by the operation does not exist."""

    def __init__(self, type_enregistrement, record_id):
        super().__init__(f"{type_enregistrement.value}/{record_id} introuvable")
        self.type_enregistrement = type_enregistrement
        self.record_id = record_id


class TransitionError(ValueError):
    """A transition targets a status the workflow does not know."""
