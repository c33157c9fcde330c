"""Schema-driven model code generation: column inference, naming aliases and Jinja2 template output."""

__version__ = "0.1.0"