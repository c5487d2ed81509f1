"""
Tests for the environment probe — os-release parsing and architecture mapping.
"""

from pathlib import Path

import pytest

from wazuh_provisioner.core.errors import ArchitectureDetectionError, DistributionDetectionError
from wazuh_provisioner.core.models.host import Architecture, Distribution
from wazuh_provisioner.core.services.environment import (
    detect_host,
    effective_version,
    get_architecture,
    get_distribution_and_version,
    host_with_overrides,
    parse_os_release,
)


class TestParseOsRelease:
    def test_strips_quotes(self):
        fields = parse_os_release('ID="ubuntu"\nVERSION_ID="22.04"\n')
        assert fields["ID"] == "ubuntu"
        assert fields["VERSION_ID"] == "22.04"

    def test_unquoted_values(self):
        assert parse_os_release("ID=debian\n")["ID"] == "debian"

    def test_single_quotes(self):
        assert parse_os_release("ID='fedora'\n")["ID"] == "fedora"

    def test_skips_comments_and_blank_lines(self):
        fields = parse_os_release("# comment\n\nID=alpine\nnot a pair\n")
        assert fields == {"ID": "alpine"}

    def test_id_like_does_not_shadow_id(self):
        fields = parse_os_release('ID=raspbian\nID_LIKE="debian"\n')
        assert fields["ID"] == "raspbian"

    def test_value_containing_equals(self):
        fields = parse_os_release('HOME_URL="https://example.org/?a=b"\n')
        assert fields["HOME_URL"] == "https://example.org/?a=b"


class TestGetDistributionAndVersion:
    @pytest.mark.parametrize("dist", [d.value for d in Distribution if d is not Distribution.AMAZON])
    def test_recognized_distributions(self, write_os_release, dist: str):
        path = write_os_release(dist, "9")
        distribution, version = get_distribution_and_version(path)
        assert distribution == Distribution(dist)
        assert version == "9"

    @pytest.mark.parametrize("version_id", ["2", "2023", "", None])
    def test_amazon_always_latest(self, write_os_release, version_id):
        path = write_os_release("amazon", version_id)
        distribution, version = get_distribution_and_version(path)
        assert distribution is Distribution.AMAZON
        assert version == "latest"

    @pytest.mark.parametrize("dist", ["arch", "gentoo", "rhel", "Ubuntu", "opensuse-leap", "amzn"])
    def test_unrecognized_id_fails(self, write_os_release, dist: str):
        with pytest.raises(DistributionDetectionError, match="Unsupported distribution"):
            get_distribution_and_version(write_os_release(dist, "1"))

    def test_missing_id_fails(self, tmp_path: Path):
        path = tmp_path / "os-release"
        path.write_text('VERSION_ID="1"\n')
        with pytest.raises(DistributionDetectionError):
            get_distribution_and_version(path)

    def test_unreadable_file_fails(self, tmp_path: Path):
        with pytest.raises(DistributionDetectionError, match="Failed to read"):
            get_distribution_and_version(tmp_path / "missing")

    def test_missing_version_is_empty(self, write_os_release):
        _, version = get_distribution_and_version(write_os_release("debian"))
        assert version == ""

    def test_error_exit_code(self, tmp_path: Path):
        with pytest.raises(DistributionDetectionError) as exc:
            get_distribution_and_version(tmp_path / "missing")
        assert exc.value.exit_code == 3


class TestGetArchitecture:
    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("i386", Architecture.I386),
            ("i686", Architecture.I386),
            ("x86_64", Architecture.X86_64),
            ("AMD64", Architecture.X86_64),
            ("aarch64", Architecture.AARCH64),
            ("arm64", Architecture.AARCH64),
            ("armv7l", Architecture.ARMHF),
            ("armv6l", Architecture.ARMHF),
            ("ppc64le", Architecture.POWERPC),
            ("ppc64", Architecture.POWERPC),
        ],
    )
    def test_known_machines(self, machine: str, expected: Architecture):
        assert get_architecture(machine) is expected

    @pytest.mark.parametrize("machine", ["s390x", "riscv64", "mips", "sparc64", ""])
    def test_unknown_machine_fails(self, machine: str):
        with pytest.raises(ArchitectureDetectionError):
            get_architecture(machine)

    def test_defaults_to_platform_machine(self, monkeypatch):
        monkeypatch.setattr("platform.machine", lambda: "aarch64")
        assert get_architecture() is Architecture.AARCH64

    def test_exactly_five_tags(self):
        assert {a.value for a in Architecture} == {"i386", "x86_64", "aarch64", "armhf", "powerpc"}


class TestDetectHost:
    def test_builds_profile(self, write_os_release):
        host = detect_host(write_os_release("ubuntu", "22.04"), machine="x86_64")
        assert host.distribution is Distribution.UBUNTU
        assert host.version == "22.04"
        assert host.architecture is Architecture.X86_64

    def test_profile_is_immutable(self, write_os_release):
        host = detect_host(write_os_release("ubuntu", "22.04"), machine="x86_64")
        with pytest.raises(Exception):
            host.version = "24.04"

    def test_architecture_failure_after_distribution(self, write_os_release):
        with pytest.raises(ArchitectureDetectionError):
            detect_host(write_os_release("debian", "12"), machine="s390x")


class TestEffectiveVersion:
    def test_amazon_pinned(self):
        assert effective_version(Distribution.AMAZON, "2023") == "latest"

    def test_others_unchanged(self):
        assert effective_version(Distribution.UBUNTU, "22.04") == "22.04"


class TestHostWithOverrides:
    def test_no_overrides_matches_detection(self, write_os_release, monkeypatch):
        monkeypatch.setattr("platform.machine", lambda: "aarch64")
        host = host_with_overrides(write_os_release("fedora", "39"))
        assert (host.distribution, host.version, host.architecture) == (
            Distribution.FEDORA, "39", Architecture.AARCH64,
        )

    def test_amazon_override_pins_latest(self, write_os_release):
        host = host_with_overrides(write_os_release("ubuntu", "22.04"), distribution="amazon", arch="x86_64")
        assert host.version == "latest"

    def test_amazon_override_needs_no_os_release(self, tmp_path: Path):
        host = host_with_overrides(tmp_path / "missing", distribution="amazon", arch="armhf")
        assert host.version == "latest"

    def test_distribution_override_on_unsupported_host(self, write_os_release):
        host = host_with_overrides(write_os_release("gentoo", "2.14"), distribution="debian", arch="i386")
        assert host.distribution is Distribution.DEBIAN
        assert host.version == "2.14"

    def test_full_override_skips_os_release(self, tmp_path: Path):
        host = host_with_overrides(
            tmp_path / "missing", distribution="suse", version="11", arch="powerpc",
        )
        assert host.version == "11"

    def test_version_override_keeps_detected_distribution(self, write_os_release):
        host = host_with_overrides(write_os_release("centos", "7"), version="5", arch="x86_64")
        assert host.distribution is Distribution.CENTOS
        assert host.version == "5"

    def test_unknown_distribution(self, tmp_path: Path):
        with pytest.raises(DistributionDetectionError, match="plan9"):
            host_with_overrides(tmp_path / "missing", distribution="plan9", version="4", arch="x86_64")

    def test_unknown_arch(self, tmp_path: Path):
        with pytest.raises(ArchitectureDetectionError, match="sparc"):
            host_with_overrides(tmp_path / "missing", distribution="debian", version="12", arch="sparc")
