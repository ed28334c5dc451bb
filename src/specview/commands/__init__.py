"""Built-in CLI sub-commands for specview.

* :mod:`~specview.commands.browse` -- ``tree``, ``overview``,
  ``operations``, ``operation``, ``schema`` and ``security``, registered
  directly on the root app.
* :mod:`~specview.commands.config` -- the ``config`` sub-command group for
  viewing and modifying the user configuration.
"""
