"""Stockroom: ERP listing queries over PostgreSQL."""
