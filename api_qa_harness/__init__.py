"""QA harness for a Product/User CRUD REST API."""
