"""Policy Watch — policy-link dedup and policy text extraction service."""
