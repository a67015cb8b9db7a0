"""Pure business logic for bills: no database or HTTP access in here."""
