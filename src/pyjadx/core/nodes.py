"""Python views of jadx's ``JavaNode`` hierarchy: methods, classes and packages."""

from __future__ import annotations

import logging

from pyjadx.core.export import PathArg, coerce_path, highlight_code, write_source
from pyjadx.core.handle import ManagedHandle
from pyjadx.core.names import pretty_class_name, simple_name
from pyjadx.core.types import AccessInfo, ArgType
from pyjadx.errors import IOFailure

logger = logging.getLogger(__name__)

# Returned by ``decompiled_line`` when jadx has no position for a node.
NO_LINE = -1


class JavaNode(ManagedHandle):
    @property
    def name(self) -> str:
        return str(self._invoke("getName"))

    @property
    def fullname(self) -> str:
        return str(self._invoke("getFullName"))

    @property
    def decompiled_line(self) -> int:
        """Line of this node in the decompiled code, or ``NO_LINE``."""
        line = self._invoke("getDecompiledLine")
        if line is None or int(line) <= 0:
            return NO_LINE
        return int(line)


class JavaMethod(JavaNode):
    TAG = "jadx.api.JavaMethod"

    @property
    def access_flags(self) -> AccessInfo:
        return self._wrap(AccessInfo, self._invoke("getAccessFlags"))

    @property
    def return_type(self) -> ArgType:
        return self._wrap(ArgType, self._invoke("getReturnType"))

    @property
    def arguments(self) -> list[ArgType]:
        return self._wrap_all(ArgType, self._invoke("getArguments"))

    @property
    def is_constructor(self) -> bool:
        return bool(self._invoke("isConstructor"))

    @property
    def is_class_init(self) -> bool:
        return bool(self._invoke("isClassInit"))

    @property
    def declaring_class(self) -> JavaClass:
        return self._wrap(JavaClass, self._invoke("getDeclaringClass"))

    def getAccessFlags(self) -> AccessInfo:  # noqa: N802
        """Alias of :attr:`access_flags` kept for scripts written against pyjadx 0.x."""
        return self.access_flags


class JavaClass(JavaNode):
    TAG = "jadx.api.JavaClass"

    @property
    def package(self) -> str:
        return str(self._invoke("getPackage"))

    @property
    def access_flags(self) -> AccessInfo:
        return self._wrap(AccessInfo, self._invoke("getAccessInfo"))

    @property
    def methods(self) -> list[JavaMethod]:
        """Methods in declaration order."""
        return self._wrap_all(JavaMethod, self._invoke("getMethods"))

    @property
    def inner_classes(self) -> list[JavaClass]:
        return self._wrap_all(JavaClass, self._invoke("getInnerClasses"))

    @property
    def code(self) -> str:
        """Full decompiled source of the class."""
        code = self._invoke("getCode")
        return "" if code is None else str(code)

    @property
    def code_highlight(self) -> str:
        """Decompiled source colored for a terminal (requires Pygments)."""
        return highlight_code(self.code)

    def save(self, output_path: PathArg) -> bool:
        """Save the decompiled code in the file given in first parameter.

        Returns ``False`` if the file could not be written.
        """
        path = coerce_path(output_path)
        with self._scope.shared():
            code = self.code
            try:
                write_source(path, code)
            except IOFailure as exc:
                logger.warning("Failed to save %s: %s", self.fullname, exc)
                return False
        logger.debug("Saved %s to %s", self.fullname, path)
        return True


class JavaPackage(JavaNode):
    TAG = "jadx.api.JavaPackage"

    @property
    def name(self) -> str:
        """Last segment of the package name."""
        return simple_name(self.fullname)

    @property
    def classes(self) -> list[JavaClass]:
        return self._wrap_all(JavaClass, self._invoke("getClasses"))

    def save(self, output_path: PathArg) -> bool:
        """Decompile every class of the package into the directory given in first parameter.

        Each class is written to ``<directory>/<package path>/<Class>.java``. A
        class that cannot be written does not stop the others; the result is
        ``False`` if any of them failed.
        """
        directory = coerce_path(output_path)
        failures: list[str] = []
        with self._scope.shared():
            classes = self.classes
            for cls in classes:
                fullname = cls.fullname
                if not cls.save(directory / pretty_class_name(fullname, with_ext=True)):
                    failures.append(fullname)
        if failures:
            logger.warning("Package %s: %d of %d classes not saved", self.fullname, len(failures), len(classes))
            return False
        return True
