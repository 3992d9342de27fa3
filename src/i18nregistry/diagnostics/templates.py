"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All registry and formatter error messages are created here, so tests can
    assert on codes and fields instead of matching message prose.
    """

    @staticmethod
    def invalid_argument(name: str, received: object) -> Diagnostic:
        """Required argument missing or of the wrong type.

        Args:
            name: Parameter name as seen by the caller
            received: The offending value

        Returns:
            Diagnostic for INVALID_ARGUMENT
        """
        if received is None:
            msg = f"Argument '{name}' must not be None"
        else:
            msg = f"Argument '{name}' is invalid: {received!r}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGUMENT,
            message=msg,
            hint=f"Pass a non-empty string for '{name}'",
            received_type=type(received).__name__,
        )

    @staticmethod
    def invalid_locale(locale: str, reason: str) -> Diagnostic:
        """Locale code could not be normalized.

        Args:
            locale: The locale code as supplied
            reason: Why it was rejected

        Returns:
            Diagnostic for INVALID_LOCALE
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_LOCALE,
            message=f"Invalid locale code {locale!r}: {reason}",
            hint="Use a BCP-47 (en-US) or POSIX (en_US) locale code",
            locale=locale,
        )

    @staticmethod
    def bundle_not_registered(bundle_name: str | None) -> Diagnostic:
        """Bundle is not present in the registry.

        Args:
            bundle_name: The bundle name that was not found

        Returns:
            Diagnostic for BUNDLE_NOT_REGISTERED
        """
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_NOT_REGISTERED,
            message=f"Bundle {bundle_name!r} is not registered",
            hint="Register the bundle with add_bundle() before using it",
            bundle_name=bundle_name,
        )

    @staticmethod
    def key_not_in_bundle(key: str, bundle_name: str) -> Diagnostic:
        """Key missing from a specific bundle.

        Args:
            key: The lookup key
            bundle_name: The bundle that was consulted

        Returns:
            Diagnostic for KEY_NOT_IN_BUNDLE
        """
        return Diagnostic(
            code=DiagnosticCode.KEY_NOT_IN_BUNDLE,
            message=f"Key '{key}' not found in bundle '{bundle_name}'",
            hint="Check that the key is defined in the bundle's source",
            bundle_name=bundle_name,
            key=key,
        )

    @staticmethod
    def key_not_in_any_bundle(key: str, bundle_count: int) -> Diagnostic:
        """Key missing from every registered bundle.

        Args:
            key: The lookup key
            bundle_count: Number of bundles scanned

        Returns:
            Diagnostic for KEY_NOT_IN_ANY_BUNDLE
        """
        if bundle_count == 0:
            hint = "No bundles are registered; call add_bundle() first"
        else:
            hint = f"Scanned {bundle_count} bundle(s); none defines this key"
        return Diagnostic(
            code=DiagnosticCode.KEY_NOT_IN_ANY_BUNDLE,
            message=f"Key '{key}' not found in any registered bundle",
            hint=hint,
            key=key,
        )

    @staticmethod
    def bundle_load_failed(
        namespace: str, bundle_name: str, locale: str | None, error: BaseException
    ) -> Diagnostic:
        """Loader could not produce a text set.

        Args:
            namespace: Loader namespace
            bundle_name: Requested bundle
            locale: Requested locale (None for the base bundle)
            error: The loader's exception

        Returns:
            Diagnostic for BUNDLE_LOAD_FAILED
        """
        where = f"{bundle_name}" if locale is None else f"{bundle_name} ({locale})"
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_LOAD_FAILED,
            message=f"Can't load bundle {where} from namespace '{namespace}': {error}",
            hint="Check the namespace, bundle name and locale against the loader's sources",
            bundle_name=bundle_name,
            namespace=namespace,
            locale=locale,
        )

    @staticmethod
    def source_too_large(source_path: str, size: int, limit: int) -> Diagnostic:
        """Bundle source exceeds the size limit.

        Args:
            source_path: Human-readable source location
            size: Actual size in bytes
            limit: Configured limit in bytes

        Returns:
            Diagnostic for BUNDLE_SOURCE_TOO_LARGE
        """
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_SOURCE_TOO_LARGE,
            message=f"Bundle source {source_path} is {size} bytes (limit {limit})",
            hint="Split the bundle into several smaller bundles",
        )

    @staticmethod
    def entry_invalid(bundle_name: str, key: object, value: object) -> Diagnostic:
        """Loaded entry is not a str -> str pair.

        Args:
            bundle_name: Bundle being built
            key: Offending key
            value: Offending value

        Returns:
            Diagnostic for BUNDLE_ENTRY_INVALID
        """
        return Diagnostic(
            code=DiagnosticCode.BUNDLE_ENTRY_INVALID,
            message=(
                f"Bundle '{bundle_name}' entry {key!r} must map str to str, "
                f"got {type(key).__name__} -> {type(value).__name__}"
            ),
            bundle_name=bundle_name,
            expected_type="str",
            received_type=type(value).__name__,
        )

    @staticmethod
    def format_missing_argument(template: str, specifier: str, index: int) -> Diagnostic:
        """Template refers to a positional argument that was not supplied.

        Args:
            template: The template text
            specifier: The format specifier (e.g. '%2$s')
            index: 1-based argument index requested

        Returns:
            Diagnostic for FORMAT_MISSING_ARGUMENT
        """
        return Diagnostic(
            code=DiagnosticCode.FORMAT_MISSING_ARGUMENT,
            message=f"Format specifier '{specifier}' has no argument {index}",
            hint="Supply one value per placeholder; pass None to print 'null'",
            template=template,
            argument_index=index,
        )

    @staticmethod
    def format_conversion_mismatch(
        template: str, conversion: str, index: int, expected: str, value: object
    ) -> Diagnostic:
        """Value type incompatible with the conversion character.

        Args:
            template: The template text
            conversion: Conversion character (e.g. 'd')
            index: 1-based argument index
            expected: Accepted type description
            value: The offending value

        Returns:
            Diagnostic for FORMAT_CONVERSION_MISMATCH
        """
        received = type(value).__name__
        return Diagnostic(
            code=DiagnosticCode.FORMAT_CONVERSION_MISMATCH,
            message=f"%{conversion} != {received} (argument {index})",
            hint=f"Conversion '%{conversion}' accepts {expected}",
            template=template,
            argument_index=index,
            expected_type=expected,
            received_type=received,
        )

    @staticmethod
    def format_unknown_conversion(template: str, specifier: str) -> Diagnostic:
        """Unknown or incomplete format specifier.

        Args:
            template: The template text
            specifier: The unparseable specifier text

        Returns:
            Diagnostic for FORMAT_UNKNOWN_CONVERSION
        """
        return Diagnostic(
            code=DiagnosticCode.FORMAT_UNKNOWN_CONVERSION,
            message=f"Unknown format conversion '{specifier}'",
            hint="Escape a literal percent sign as '%%'",
            template=template,
        )

    @staticmethod
    def format_flags_mismatch(template: str, specifier: str, reason: str) -> Diagnostic:
        """Flags, width or precision not valid for the conversion.

        Args:
            template: The template text
            specifier: The offending specifier
            reason: Which rule was broken

        Returns:
            Diagnostic for FORMAT_FLAGS_MISMATCH
        """
        return Diagnostic(
            code=DiagnosticCode.FORMAT_FLAGS_MISMATCH,
            message=f"Format specifier '{specifier}': {reason}",
            template=template,
        )
