"""
Sanity API migrators and helpers.

This subpackage provides functions to interact with the Sanity HTTP API for
downloading and re-uploading image and file assets and for writing
documents with ``createOrReplace`` mutations.
"""
