"""Service integrations: datastore, password and token codecs."""
