"""Content Files API: a REST facade over blob storage containers."""
