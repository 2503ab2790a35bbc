"""HTTP surface for uploading record sets and reading ledger reports."""
