from typing import List, Optional

from ..types.models import PackageManifest


class Templates:
    """Шаблоны для генерации файлов пакета"""

    root_module = """Microsoft.PowerShell.Core\\Set-StrictMode -Version Latest

# Generated by swagger-packager
$script:ModuleVersion = {module_version}
$script:ClientRuntimeVersion = {client_runtime_version}
$script:Namespace = {namespace}

. (Join-Path -Path $PSScriptRoot -ChildPath 'GeneratedHelpers.ps1')
Microsoft.PowerShell.Utility\\Import-LocalizedData -BindingVariable LocalizedData -FileName {resources_file}

$clr = if ('Core' -eq $PSVersionTable.PSEdition) {{ 'coreclr' }} else {{ 'fullclr' }}
$assemblyPath = Join-Path -Path $PSScriptRoot -ChildPath "ref/$clr/$script:Namespace.dll"

if (Test-Path -Path $assemblyPath -PathType Leaf) {{
    Add-Type -Path $assemblyPath
}}
else {{
    Initialize-GeneratedAssembly `
        -ModuleRoot $PSScriptRoot `
        -Namespace $script:Namespace `
        -ClientRuntimeVersion $script:ClientRuntimeVersion `
        -CatalogPath (Join-Path -Path $PSScriptRoot -ChildPath {catalog_path})
}}

Get-ChildItem -Path (Join-Path -Path $PSScriptRoot -ChildPath {generated_directory}) -Filter '*.ps1' -Recurse -File |
    ForEach-Object {{ . $_.FullName }}
"""

    manifest = """@{{
    RootModule = {root_module}
    ModuleVersion = {version}
    GUID = {guid}
    Author = {author}
    CompanyName = {company}
    Copyright = {copyright}
    Description = {description}
    PowerShellVersion = '5.0'
    RequiredModules = {required_modules}
    FunctionsToExport = {functions_to_export}
    CmdletsToExport = @()
    AliasesToExport = @()
    VariablesToExport = @()
    FormatsToProcess = {formats_to_process}
{optional_entries}    PrivateData = @{{
        PSData = @{{
{ps_data}        }}
    }}
}}
"""


templates = Templates()


def quote(value: Optional[str]) -> str:
    """Строка PowerShell в одинарных кавычках"""
    return "'" + (value or "").replace("'", "''") + "'"


def quote_list(values: List[str]) -> str:
    if not values:
        return "@()"
    return "@(" + ", ".join(quote(v) for v in values) + ")"


def render_root_module(
    module_name: str,
    module_version: str,
    namespace: str,
    client_runtime_version: str,
    catalog_path: str,
    generated_directory: str,
) -> str:
    """Текст корневого модуля, все значения подставляются как строки PowerShell"""
    return templates.root_module.format(
        module_version=quote(module_version),
        client_runtime_version=quote(client_runtime_version),
        namespace=quote(namespace),
        resources_file=quote(f"{module_name}.Resources.psd1"),
        catalog_path=quote(catalog_path),
        generated_directory=quote(generated_directory),
    )


def render_manifest(manifest: PackageManifest, include_uris: bool = True) -> str:
    """
    Текст манифеста пакета.

    Prefix добавляется только если он задан; ProjectUri/LicenseUri
    только если хост их поддерживает (include_uris).
    """
    optional_entries = ""
    if manifest.prefix:
        optional_entries += f"    DefaultCommandPrefix = {quote(manifest.prefix)}\n"

    ps_data = ""
    if include_uris:
        if manifest.project_uri:
            ps_data += f"            ProjectUri = {quote(manifest.project_uri)}\n"
        if manifest.license_uri:
            ps_data += f"            LicenseUri = {quote(manifest.license_uri)}\n"

    return templates.manifest.format(
        root_module=quote(manifest.root_module),
        version=quote(manifest.version),
        guid=quote(manifest.guid),
        author=quote(manifest.author),
        company=quote(manifest.company),
        copyright=quote(manifest.copyright),
        description=quote(manifest.description),
        required_modules=quote_list(manifest.required_modules),
        functions_to_export=quote_list(manifest.functions_to_export),
        formats_to_process=quote_list(manifest.formats_to_process),
        optional_entries=optional_entries,
        ps_data=ps_data,
    )
