"""Repository layer: SQL statements for the adapter tables (SQLite).

Keep functions thin and focused, so the adapter avoids SQL strings.
Every function takes anything with an async ``sql()`` method: a ``Database``
or the ``Executor`` of an open transaction.
"""
