"""
tinyhatchet interactive terminal UI: ``src/tinyhatchet/ui/``.

Only ``app.py`` imports Textual.  Everything else (``state``, ``commands``,
``dispatcher``, ``screens``) is the pure screen state machine and can be
driven and tested without a terminal.

Entry point::

    from tinyhatchet.ui.app import run
    run(session)
"""
