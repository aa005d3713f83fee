"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
settings, schema bootstrap, validation, error envelopes). Keep form- or
purchase-specific SQL in the corresponding feature package (e.g. `purchases/`).
"""
