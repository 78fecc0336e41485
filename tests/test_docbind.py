"""
Tests for the Descriptor Doc-Binder.

These tests verify:
    - Classification of every descriptor kind
    - The one-shot-write invariant for each kind
    - UTF-8 normalization of the documentation text
    - No mutation when any check fails
    - Batch documentation through attach_docs
"""

import logging
import types

import pytest
from hostbridge.docbind import (
    DescriptorKind,
    classify_descriptor,
    normalize_doc,
    attach_doc,
    attach_docs,
)
from hostbridge.errors import (
    DocBindError,
    InvalidEncodingError,
    AlreadyDocumentedError,
    UnsupportedTargetError,
)


def make_function():
    def open_store(path):
        return path
    return open_store


def make_class():
    class Blob:
        def size(self):
            return 0

        @staticmethod
        def create():
            return Blob()

        @classmethod
        def load(cls):
            return cls()

        @property
        def id(self):
            return 1

    return Blob


class Slotted:
    __slots__ = ()


class Record:
    __slots__ = ("key",)


class TestClassification:
    """Test descriptor kind detection."""

    def test_plain_function(self):
        assert classify_descriptor(make_function()) is DescriptorKind.CALLABLE

    def test_builtin_function(self):
        assert classify_descriptor(len) is DescriptorKind.CALLABLE

    def test_bound_method(self):
        blob = make_class()()
        assert classify_descriptor(blob.size) is DescriptorKind.BOUND_METHOD

    def test_method_descriptors(self):
        cls = make_class()
        assert classify_descriptor(cls.__dict__["create"]) is DescriptorKind.METHOD_DESCRIPTOR
        assert classify_descriptor(cls.__dict__["load"]) is DescriptorKind.METHOD_DESCRIPTOR
        assert classify_descriptor(str.join) is DescriptorKind.METHOD_DESCRIPTOR

    def test_properties(self):
        cls = make_class()
        assert classify_descriptor(cls.__dict__["id"]) is DescriptorKind.PROPERTY
        assert classify_descriptor(types.FunctionType.__code__) is DescriptorKind.PROPERTY

    def test_type(self):
        assert classify_descriptor(make_class()) is DescriptorKind.TYPE
        assert classify_descriptor(int) is DescriptorKind.TYPE

    def test_generic(self):
        assert classify_descriptor(types.ModuleType("m")) is DescriptorKind.GENERIC


class TestNormalizeDoc:
    """Test documentation text normalization."""

    def test_str_passthrough(self):
        assert normalize_doc("hello") == "hello"

    def test_utf8_bytes(self):
        assert normalize_doc("héllo".encode("utf-8")) == "héllo"
        assert normalize_doc(bytearray(b"hi")) == "hi"
        assert normalize_doc(memoryview(b"hi")) == "hi"

    def test_invalid_utf8(self):
        with pytest.raises(InvalidEncodingError):
            normalize_doc(b"\xff\xfe")

    def test_lone_surrogate(self):
        with pytest.raises(InvalidEncodingError):
            normalize_doc("\ud800")

    def test_not_text(self):
        with pytest.raises(InvalidEncodingError, match="int"):
            normalize_doc(42)

    def test_returns_exact_str(self):
        """str subclasses are copied into a plain str."""
        class Doc(str):
            pass
        out = normalize_doc(Doc("hello"))
        assert type(out) is str
        assert out == "hello"


class TestPlainCallable:
    """Test the one-shot-write invariant on functions."""

    def test_attach_then_read(self):
        f = make_function()
        attach_doc(f, "hello")
        assert f.__doc__ == "hello"

    def test_second_attach_rejected(self):
        f = make_function()
        attach_doc(f, "hello")
        with pytest.raises(AlreadyDocumentedError, match="open_store") as excinfo:
            attach_doc(f, "again")
        assert f.__doc__ == "hello"
        assert "open_store" in excinfo.value.name

    def test_existing_docstring_rejected(self):
        def documented():
            """Already here."""
        with pytest.raises(AlreadyDocumentedError):
            attach_doc(documented, "new")
        assert documented.__doc__ == "Already here."

    def test_empty_docstring_counts_as_absent(self):
        f = make_function()
        f.__doc__ = ""
        attach_doc(f, "filled")
        assert f.__doc__ == "filled"

    def test_invalid_encoding_does_not_mutate(self):
        f = make_function()
        with pytest.raises(InvalidEncodingError):
            attach_doc(f, b"\xc3\x28")
        assert f.__doc__ is None

    def test_bytes_text(self):
        f = make_function()
        attach_doc(f, "naïve".encode("utf-8"))
        assert f.__doc__ == "naïve"

    def test_builtin_already_documented(self):
        with pytest.raises(AlreadyDocumentedError, match="len"):
            attach_doc(len, "length")


class TestBoundMethod:
    """Test documentation through a bound method."""

    def test_writes_underlying_function(self):
        cls = make_class()
        blob = cls()
        attach_doc(blob.size, "Size in bytes.")
        assert cls.size.__doc__ == "Size in bytes."
        assert blob.size.__doc__ == "Size in bytes."

    def test_second_attach_rejected(self):
        blob = make_class()()
        attach_doc(blob.size, "Size in bytes.")
        with pytest.raises(AlreadyDocumentedError, match="size"):
            attach_doc(blob.size, "again")


class TestMethodDescriptor:
    """Test staticmethod, classmethod and C method descriptors."""

    def test_staticmethod(self):
        cls = make_class()
        attach_doc(cls.__dict__["create"], "Create a blob.")
        assert cls.__dict__["create"].__doc__ == "Create a blob."
        assert cls.create.__doc__ == "Create a blob."

    def test_classmethod(self):
        cls = make_class()
        attach_doc(cls.__dict__["load"], "Load a blob.")
        assert cls.__dict__["load"].__doc__ == "Load a blob."
        assert cls.load.__doc__ == "Load a blob."

    def test_second_attach_rejected(self):
        cls = make_class()
        attach_doc(cls.__dict__["create"], "Create a blob.")
        with pytest.raises(AlreadyDocumentedError, match="create"):
            attach_doc(cls.__dict__["create"], "again")

    def test_c_method_descriptor_already_documented(self):
        with pytest.raises(AlreadyDocumentedError, match="join"):
            attach_doc(str.join, "joins")

    def test_wrapped_function_already_documented(self):
        """A doc set on the function after wrapping still counts."""
        def create():
            return None
        wrapper = staticmethod(create)
        create.__doc__ = "Set later."
        with pytest.raises(AlreadyDocumentedError, match="create"):
            attach_doc(wrapper, "Create a blob.")
        assert wrapper.__doc__ is None
        assert create.__doc__ == "Set later."


class TestProperty:
    """Test property and get-set descriptors."""

    def test_property(self):
        cls = make_class()
        attach_doc(cls.__dict__["id"], "Object id.")
        assert cls.id.__doc__ == "Object id."

    def test_second_attach_rejected_names_getter(self):
        cls = make_class()
        attach_doc(cls.__dict__["id"], "Object id.")
        with pytest.raises(AlreadyDocumentedError, match="id"):
            attach_doc(cls.__dict__["id"], "again")
        assert cls.id.__doc__ == "Object id."

    def test_documented_getter(self):
        prop = property(lambda self: 1, doc="From getter.")
        with pytest.raises(AlreadyDocumentedError):
            attach_doc(prop, "again")

    def test_slot_descriptor_is_read_only(self):
        """__slots__ member descriptors cannot take a docstring."""
        member = Record.__dict__["key"]
        assert classify_descriptor(member) is DescriptorKind.PROPERTY
        with pytest.raises(UnsupportedTargetError, match="attribute"):
            attach_doc(member, "Record key.")
        assert member.__doc__ is None

    def test_getset_descriptor_is_read_only(self):
        descriptor = types.FunctionType.__dict__["__code__"]
        with pytest.raises(UnsupportedTargetError):
            attach_doc(descriptor, "Code object.")
        assert descriptor.__doc__ is None


class TestTypeObject:
    """Test class documentation."""

    def test_class(self):
        cls = make_class()
        attach_doc(cls, "A binary object.")
        assert cls.__doc__ == "A binary object."

    def test_second_attach_rejected(self):
        cls = make_class()
        attach_doc(cls, "A binary object.")
        with pytest.raises(AlreadyDocumentedError, match="Blob"):
            attach_doc(cls, "again")

    def test_builtin_type_already_documented(self):
        with pytest.raises(AlreadyDocumentedError, match="type 'int'"):
            attach_doc(int, "integers")


class TestGenericFallback:
    """Test objects documented through the generic attribute protocol."""

    def test_module(self):
        mod = types.ModuleType("store")
        attach_doc(mod, "Store bindings.")
        assert mod.__doc__ == "Store bindings."

    def test_second_attach_rejected(self):
        mod = types.ModuleType("store")
        attach_doc(mod, "Store bindings.")
        with pytest.raises(AlreadyDocumentedError, match="object already"):
            attach_doc(mod, "again")

    def test_bytes_doc_counts_as_documented(self):
        mod = types.ModuleType("store")
        mod.__doc__ = b"raw"
        with pytest.raises(AlreadyDocumentedError):
            attach_doc(mod, "text")

    def test_immutable_object(self):
        """Objects without writable __doc__ raise UnsupportedTarget."""
        with pytest.raises(UnsupportedTargetError):
            attach_doc(Slotted(), "nope")

    def test_errors_share_a_base(self):
        with pytest.raises(DocBindError):
            attach_doc(Slotted(), "nope")


class TestAttachDocs:
    """Test batch documentation of a class."""

    def test_documents_raw_descriptors(self):
        cls = make_class()
        attach_docs(cls, {
            "": "A binary object.",
            "size": "Size in bytes.",
            "create": "Create a blob.",
            "load": "Load a blob.",
            "id": "Object id.",
        })
        assert cls.__doc__ == "A binary object."
        assert cls.size.__doc__ == "Size in bytes."
        assert cls.__dict__["create"].__doc__ == "Create a blob."
        assert cls.__dict__["load"].__doc__ == "Load a blob."
        assert cls.id.__doc__ == "Object id."

    def test_missing_name(self):
        cls = make_class()
        with pytest.raises(UnsupportedTargetError, match="nothing"):
            attach_docs(cls, {"nothing": "x"})

    def test_stops_at_first_failure(self):
        cls = make_class()
        with pytest.raises(UnsupportedTargetError):
            attach_docs(cls, {"size": "one", "nothing": "x", "load": "three"})
        assert cls.size.__doc__ == "one"
        assert cls.__dict__["load"].__doc__ is None


class TestLogging:
    """Test that bindings are logged."""

    def test_debug_record(self, caplog):
        f = make_function()
        with caplog.at_level(logging.DEBUG, logger="hostbridge"):
            attach_doc(f, "hello")
        assert "attached docstring to function" in caplog.text
        assert "open_store" in caplog.text
