"""HashVault core: the report codec and the hashing pipeline."""
