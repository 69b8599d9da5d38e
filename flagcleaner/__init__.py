"""flagcleaner - Remove a feature flag and its #if scaffolding from Swift and Objective-C projects."""

__version__ = "0.1.0"
