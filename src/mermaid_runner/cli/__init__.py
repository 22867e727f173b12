"""mermaid-runner command line interface."""
