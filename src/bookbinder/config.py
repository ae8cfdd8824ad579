"""Assembler configuration: locale labels, templates and compression."""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookbinder.errors import UnknownLocaleError

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class LocaleLabels(BaseModel):
    """Localised labels for the fixed book documents."""

    model_config = ConfigDict(frozen=True)

    code: str
    cover: str
    toc: str
    info: str
    note: str
    direction: str = "ltr"  # "ltr" | "rtl"


DEFAULT_LOCALES: tuple[LocaleLabels, ...] = (
    LocaleLabels(code="en", cover="Cover", toc="Table of Contents", info="Information", note="Notes"),
    LocaleLabels(code="vi", cover="Bìa sách", toc="Mục lục", info="Giới thiệu", note="Ghi chú"),
    LocaleLabels(code="fr", cover="Couverture", toc="Table des matières", info="Informations", note="Notes"),
    LocaleLabels(code="de", cover="Titelbild", toc="Inhaltsverzeichnis", info="Informationen", note="Anmerkungen"),
    LocaleLabels(code="es", cover="Portada", toc="Índice", info="Información", note="Notas"),
    LocaleLabels(code="it", cover="Copertina", toc="Indice", info="Informazioni", note="Note"),
    LocaleLabels(code="pt", cover="Capa", toc="Sumário", info="Informações", note="Notas"),
    LocaleLabels(code="ru", cover="Обложка", toc="Содержание", info="Информация", note="Примечания"),
    LocaleLabels(code="uk", cover="Обкладинка", toc="Зміст", info="Інформація", note="Примітки"),
    LocaleLabels(code="pl", cover="Okładka", toc="Spis treści", info="Informacje", note="Uwagi"),
    LocaleLabels(code="cs", cover="Obálka", toc="Obsah", info="Informace", note="Poznámky"),
    LocaleLabels(code="nl", cover="Omslag", toc="Inhoudsopgave", info="Informatie", note="Notities"),
    LocaleLabels(code="sv", cover="Omslag", toc="Innehåll", info="Information", note="Anteckningar"),
    LocaleLabels(code="tr", cover="Kapak", toc="İçindekiler", info="Bilgi", note="Notlar"),
    LocaleLabels(code="id", cover="Sampul", toc="Daftar Isi", info="Informasi", note="Catatan"),
    LocaleLabels(code="th", cover="ปก", toc="สารบัญ", info="ข้อมูล", note="หมายเหตุ"),
    LocaleLabels(code="ja", cover="表紙", toc="目次", info="情報", note="注記"),
    LocaleLabels(code="zh", cover="封面", toc="目录", info="信息", note="注释"),
    LocaleLabels(code="ko", cover="표지", toc="목차", info="정보", note="메모"),
    LocaleLabels(code="ar", cover="الغلاف", toc="جدول المحتويات", info="معلومات", note="ملاحظات", direction="rtl"),
)


def _default_locale_table() -> dict[str, LocaleLabels]:
    return {labels.code: labels for labels in DEFAULT_LOCALES}


class AssemblerConfig(BaseModel):
    """Immutable settings handed to an assembler at construction."""

    model_config = ConfigDict(frozen=True)

    locales: dict[str, LocaleLabels] = Field(default_factory=_default_locale_table)
    default_locale: str = "en"
    compression_level: int = Field(default=9, ge=0, le=9)
    template_dir: Path = TEMPLATES_DIR

    @field_validator("locales")
    @classmethod
    def _require_locales(cls, value: dict[str, LocaleLabels]) -> dict[str, LocaleLabels]:
        if not value:
            raise ValueError("At least one locale is required")
        return value

    def locale(self, code: str) -> LocaleLabels:
        """Look up labels for a locale code.

        Raises:
            UnknownLocaleError: If the code is not in the table
        """
        labels = self.locales.get(code)
        if labels is None:
            raise UnknownLocaleError(code)
        return labels

    def template_environment(self) -> Environment:
        """Jinja environment for the fixed book documents."""
        return _template_environment(str(self.template_dir))


@lru_cache(maxsize=8)
def _template_environment(template_dir: str) -> Environment:
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(
            enabled_extensions=("html", "xml", "opf", "ncx"),
            default_for_string=False,
        ),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
