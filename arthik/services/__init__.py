"""
Services package.

External collaborators of the client: the backend API, local storage and
chart rendering. Import from the subpackages.
"""
