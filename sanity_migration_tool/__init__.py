"""
Top-level package for the Webflow → Sanity migration utility.

This package bundles all components required to list Webflow sites,
collections and items, convert rich-text HTML to Sanity block content,
re-upload image and file assets to Sanity and write the documents.
Modules are split into subpackages:

* :mod:`sanity_migration_tool.extractors` – Webflow API listing helpers
* :mod:`sanity_migration_tool.parsers` – HTML to block content and item mapping
* :mod:`sanity_migration_tool.migrators` – Sanity API interactions
* :mod:`sanity_migration_tool.models` – pydantic models of items and documents
* :mod:`sanity_migration_tool.utils` – event logging, reports and prompts

Each layer has no direct knowledge of configuration or execution strategy;
orchestration is handled in the migration_tool.
"""
