"""HTTP transport for the restaurant finder skill."""
