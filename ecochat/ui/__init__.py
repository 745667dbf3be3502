"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with typing indicator and unsaved markers
    - Session history sidebar with new chat and delete actions
    - Error notifications for failed store calls

Contains no business logic. Delegates every action to ChatEngine and
SessionList, which talk to the session store API over HTTP.
"""
