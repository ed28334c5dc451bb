"""specview -- Browse OpenAPI 3.x documents from the terminal.

This package loads an OpenAPI description (YAML or JSON, local file or URL),
organises it into a navigation tree of operations, reusable schemas, and
security schemes, and renders any schema as a structural outline with a
synthesized example value.

Typical workflow::

    specview --spec petstore.yaml tree
    specview --spec petstore.yaml operation get-/pets
    specview --spec petstore.yaml schema Pet

Modules:
    app: Typer application and CLI entry point.
    context: The explicit holder of the currently loaded document.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
