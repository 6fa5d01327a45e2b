"""
Central Signal Registry for import events.

Uses Flask's built-in blinker integration so that other parts of the app
(and tests) can react to background imports without polling the database.

Usage:
    # Publisher (sender)
    from simplecards_app.core.signals import module_imported
    module_imported.send(work, source='csv', module_uuid=..., ...)

    # Subscriber (receiver)
    @module_imported.connect
    def on_module_imported(sender, **kwargs):
        ...
"""
from blinker import Namespace

import_signals = Namespace()

# Signal: Fired when an import job stored a new module with its cards
# Payload: source ('quizlet' | 'csv'), module_uuid, user_uuid, module_name, cards_count
module_imported = import_signals.signal('module_imported')

# Signal: Fired when an import job gave up (fetch, parse, read or storage failure)
# Payload: source, user_uuid, module_name, error (str)
module_import_failed = import_signals.signal('module_import_failed')
