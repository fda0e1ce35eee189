"""Portal core: settings, store connection, logging, errors, security."""
