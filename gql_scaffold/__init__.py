"""Scaffold graphql-ruby schema classes, stubs, and specs from a GraphQL schema."""

__version__ = "0.1.0"
