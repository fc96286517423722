"""gomod-runner: run go get/install/mod tidy against a separate go.mod."""

__version__ = "0.1.0"
