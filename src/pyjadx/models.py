from pydantic import BaseModel, ConfigDict, Field, model_validator


class LoadOptions(BaseModel):
    """Decompiler settings applied when an input is loaded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    escape_unicode: bool = True
    show_inconsistent_code: bool = True
    deobfuscation_on: bool = False
    deobfuscation_min_length: int = Field(default=3, ge=0)
    deobfuscation_max_length: int = Field(default=64, ge=1)

    @model_validator(mode="after")
    def _check_deobfuscation_bounds(self) -> "LoadOptions":
        if self.deobfuscation_min_length > self.deobfuscation_max_length:
            raise ValueError(
                f"deobfuscation_min_length ({self.deobfuscation_min_length}) is greater than "
                f"deobfuscation_max_length ({self.deobfuscation_max_length})"
            )
        return self


# In-memory artifacts: the input format of pyjadx.runtime.memory.InMemoryEngine.


class MethodModel(BaseModel):
    name: str
    access_flags: int = 0x1
    return_type: str = "void"
    arguments: list[str] = Field(default_factory=list)
    body: list[str] = Field(default_factory=list)


class ClassModel(BaseModel):
    fullname: str
    access_flags: int = 0x1
    methods: list[MethodModel] = Field(default_factory=list)
    inconsistent: bool = False
    code: str | None = None


class ArtifactModel(BaseModel):
    classes: list[ClassModel]
