"""ADSTUDIO utilities: logging, prompt building, parsing, image payloads."""
