# topmark:header:start
#
#   project      : ZipSniff
#   file         : java.py
#   file_relpath : src/zipsniff/catalog/builtins/java.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Java and mobile application archives.

A manifest or compiled classes only say "Java archive"; web, enterprise and
Android archives are refinements of that family. iOS application bundles are
plain ZIP files with a ``Payload/<name>.app/`` directory.

Exports:
    RULES: JAR family hints and the WAR, EAR, APK and IPA rules.
"""

from __future__ import annotations

from typing import Final

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.mediatypes import MediaType

JAR: Final[MediaType] = MediaType.application("java-archive")
WAR: Final[MediaType] = MediaType.application("x-tika-java-web-archive")
EAR: Final[MediaType] = MediaType.application("x-tika-java-enterprise-archive")
APK: Final[MediaType] = MediaType.application("vnd.android.package-archive")
IPA: Final[MediaType] = MediaType.application("x-itunes-ipa")

RULES: list[SignatureRule] = [
    SignatureRule(
        name="android_manifest",
        media_type=APK,
        priority=Priority.DEFINITIVE,
        entry_name="AndroidManifest.xml",
        parent=JAR,
        description="Android application package",
    ),
    SignatureRule(
        name="android_dex",
        media_type=APK,
        priority=Priority.SPECIFIC,
        entry_name="classes.dex",
        parent=JAR,
        description="Android application package (Dalvik bytecode)",
    ),
    SignatureRule(
        name="web_archive",
        media_type=WAR,
        priority=Priority.SPECIFIC,
        entry_prefix="WEB-INF/",
        parent=JAR,
        description="Java web application archive",
    ),
    SignatureRule(
        name="enterprise_archive",
        media_type=EAR,
        priority=Priority.SPECIFIC,
        entry_name="META-INF/application.xml",
        parent=JAR,
        description="Java enterprise application archive",
    ),
    SignatureRule(
        name="ios_app",
        media_type=IPA,
        priority=Priority.SPECIFIC,
        entry_pattern=r"Payload/[^/]+\.app/.*",
        description="iOS application archive",
    ),
    SignatureRule(
        name="jar_manifest",
        media_type=JAR,
        priority=Priority.FAMILY,
        entry_name="META-INF/MANIFEST.MF",
        description="Java archive",
    ),
    SignatureRule(
        name="jar_class",
        media_type=JAR,
        priority=Priority.FAMILY,
        entry_suffix=".class",
        description="Java archive (compiled classes)",
    ),
]
