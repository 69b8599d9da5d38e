"""flagcleaner utils - Settings, errors and result records."""
