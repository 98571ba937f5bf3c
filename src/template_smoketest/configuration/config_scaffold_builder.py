"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for template-smoketest.
# Every value is optional; remove a line to fall back to its default.
# Command line flags take precedence over values in this file.

cluster:
  # Path to a kubeconfig file. Defaults to $KUBECONFIG or ~/.kube/config.
  # kubeconfig: "<OPTIONAL>"
  # Kubeconfig context to use. Defaults to the current context.
  # context: "<OPTIONAL>"
  # Namespace the smoketest objects are created in.
  # Defaults to the namespace of the selected context, else "default".
  # namespace: "<OPTIONAL>"
  # Use the pod service account instead of a kubeconfig file.
  in_cluster: false

monitor:
  # Address the /healthz and /metrics endpoints listen on.
  listen_address: ":8080"
  # Keep the template, secret and template instance after each run.
  keep_objects: false
  # Seconds between smoketest runs.
  interval_seconds: 300
  # Seconds to wait for a template instance to become ready.
  timeout_seconds: 60
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
