"""
Services module - backend client, workflow controller, export and storage.
"""
