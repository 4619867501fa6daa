"""Exceptions raised by the data-access layer."""


class DataAccessFailure(Exception):
    """Any fault raised while reading from the CRM store.

    Connectivity faults, malformed queries and missing tables all land here;
    report handlers do not distinguish between them.
    """
