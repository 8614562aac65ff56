"""Entity records, the persisted timestamp schema and form validation rules."""
