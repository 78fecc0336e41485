#!/usr/bin/env python3
"""
Demo: encode object metadata, print it as JSON/YAML, and document a binding.
"""

from hostbridge import encode, decode, attach_doc, AlreadyDocumentedError
from hostbridge.config import configure_logging
from hostbridge.serialization import document_to_json, document_to_yaml


def open_store(path):
    return path


def main():
    configure_logging()

    meta = {
        "typename": "Tensor<double>",
        "shape": (2, 3),
        "nbytes": 2 ** 63 + 1,
        "checksum": b"\x00\xff\x10",
        "labels": {"owner": "alice", "global": False},
    }

    doc = encode(meta)
    print("=" * 80)
    print("DOCUMENT")
    print("-" * 80)
    print(doc)
    print("\nJSON:")
    print(document_to_json(doc, indent=2))
    print("\nYAML:")
    print(document_to_yaml(doc))
    print("Decoded back:", decode(doc))

    print("=" * 80)
    print("DOC BINDING")
    print("-" * 80)
    attach_doc(open_store, "Open an object store at the given path.")
    print("open_store.__doc__ =", repr(open_store.__doc__))
    try:
        attach_doc(open_store, "Second attempt.")
    except AlreadyDocumentedError as exc:
        print("Rejected:", exc)


if __name__ == "__main__":
    main()
