"""
Extractors for the Webflow CMS.

This subpackage lists Webflow sites, their collections and the items of a
collection through the Webflow REST API. Items are returned as the raw
dictionaries the API sends; the field mapper validates them.
"""
