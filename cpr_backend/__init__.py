"""ComfyUI provenance reader: extraction engine."""
