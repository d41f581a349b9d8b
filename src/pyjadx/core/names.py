JAVA_SOURCE_EXTENSION = ".java"
DEFAULT_PACKAGE = "defpackage"


def normalize_class_name(name: str) -> str:
    """Canonicalize a class name to the dotted form jadx reports as ``fullname``.

    Accepts dotted (``a.b.C``), slashed (``a/b/C``) and descriptor
    (``La/b/C;``) spellings.
    """
    normalized = name.strip()
    while len(normalized) > 2 and normalized.startswith("L") and normalized.endswith(";"):
        normalized = normalized[1:-1].strip()
    return normalized.replace("/", ".")


def pretty_class_name(name: str, with_ext: bool = False) -> str:
    """Return the relative source path of a class, e.g. ``a/b/C.java``."""
    pretty = normalize_class_name(name).replace(".", "/")
    if with_ext:
        pretty += JAVA_SOURCE_EXTENSION
    return pretty


def package_of(fullname: str) -> str:
    package, _, _ = normalize_class_name(fullname).rpartition(".")
    return package or DEFAULT_PACKAGE


def simple_name(fullname: str) -> str:
    return fullname.rpartition(".")[2]
