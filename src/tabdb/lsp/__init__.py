"""Language server for tabdb statement files."""
