"""Homebrew manifest rendering.

Pure functions: no network or file-system access. Field values are
interpolated as given; nothing is escaped or validated.
"""

from __future__ import annotations

from brewpublish.models.manifest import ManifestSpec, RenderedManifest
from brewpublish.models.request import PackageKind

MINIMUM_MACOS = ":monterey"

_FORMULA_TEMPLATE = """\
class {class_name} < Formula
  desc "{description}"
  homepage "{homepage}"
  url "{url}"
  version "{version}"
  sha256 "{sha256}"

  def install
    bin.install "{name}"
  end
end
"""

_CASK_TEMPLATE = """\
cask "{token}" do
  version "{version}"
  sha256 "{sha256}"

  url "{url}"
  name "{name}"
  desc "{description}"
  homepage "{homepage}"

  auto_updates true
  depends_on macos: ">= {minimum_macos}"

  app "{name}.app"
end
"""


def formula_class_name(name: str) -> str:
    """Upper-case the first letter and keep the rest: ``mytool`` -> ``Mytool``."""
    return name[:1].upper() + name[1:]


def cask_token(name: str) -> str:
    """Lower-case with spaces as hyphens: ``My Tool`` -> ``my-tool``."""
    return name.lower().replace(" ", "-")


def manifest_path(kind: PackageKind, name: str) -> str:
    """Path of the manifest inside the tap repository."""
    if kind == PackageKind.FORMULA:
        return f"Formula/{name.lower()}.rb"
    return f"Casks/{cask_token(name)}.rb"


def render_manifest(spec: ManifestSpec) -> RenderedManifest:
    """Render ``spec`` into manifest text and its target path."""
    if spec.kind == PackageKind.FORMULA:
        content = _FORMULA_TEMPLATE.format(
            class_name=formula_class_name(spec.name),
            description=spec.description,
            homepage=spec.homepage,
            url=spec.url,
            version=spec.version,
            sha256=spec.sha256,
            name=spec.name,
        )
    else:
        content = _CASK_TEMPLATE.format(
            token=cask_token(spec.name),
            version=spec.version,
            sha256=spec.sha256,
            url=spec.url,
            name=spec.name,
            description=spec.description,
            homepage=spec.homepage,
            minimum_macos=MINIMUM_MACOS,
        )
    return RenderedManifest(path=manifest_path(spec.kind, spec.name), content=content)


def commit_message(spec: ManifestSpec) -> str:
    label = "Formula" if spec.kind == PackageKind.FORMULA else "Cask"
    return f"Update {spec.name} to {spec.version} ({label})"


def install_command(kind: PackageKind, tap_slug: str, name: str) -> str:
    """The ``brew install`` line an end user runs after a publish.

    Homebrew drops the ``homebrew-`` prefix of a tap repository's name, so
    ``octo/homebrew-tap`` is addressed as ``octo/tap``.
    """
    owner, _, repo = tap_slug.partition("/")
    tap = f"{owner}/{repo.removeprefix('homebrew-')}"
    if kind == PackageKind.CASK:
        return f"brew install --cask {tap}/{cask_token(name)}"
    return f"brew install {tap}/{name.lower()}"
