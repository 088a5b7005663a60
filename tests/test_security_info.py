from tunnelclient.security_info import (
    SecurityInfo,
    V1Info,
    V2Info,
    decode_product_state,
    security_info_sets_json,
)


def test_zero_state_is_provider_none():
    info = decode_product_state(0)
    assert info.security_provider == "WSC_SECURITY_PROVIDER_NONE"
    assert info.enabled is False
    assert info.definitions_up_to_date is True


def test_antivirus_enabled_up_to_date():
    info = decode_product_state(0x041000)
    assert info.security_provider == "WSC_SECURITY_PROVIDER_ANTIVIRUS"
    assert info.enabled is True
    assert info.definitions_up_to_date is True
    assert info.product_state == 0x041000


def test_multiple_providers_joined_in_bit_order():
    info = decode_product_state(0x061100)
    assert info.security_provider == (
        "WSC_SECURITY_PROVIDER_AUTOUPDATE_SETTINGS|WSC_SECURITY_PROVIDER_ANTIVIRUS"
    )
    assert info.enabled is True


def test_disabled_and_out_of_date():
    info = decode_product_state(0x040110)
    assert info.enabled is False
    assert info.definitions_up_to_date is False


def test_all_provider_bits():
    info = decode_product_state(0x7F0000)
    parts = info.security_provider.split("|")
    assert len(parts) == 7
    assert "WSC_SECURITY_PROVIDER_NONE" not in parts
    assert parts[0] == "WSC_SECURITY_PROVIDER_FIREWALL"
    assert parts[-1] == "WSC_SECURITY_PROVIDER_SERVICE"


def test_to_json_structure():
    info = SecurityInfo(
        display_name="Defender",
        version="v1",
        v1=V1Info(product_up_to_date=True, enabled=True, version_number="1.2"),
    )
    result = info.to_json()
    assert result["displayName"] == "Defender"
    assert result["version"] == "v1"
    assert result["v1"] == {"productUpToDate": True, "enabled": True, "versionNumber": "1.2"}
    assert result["v2"]["securityProvider"] == ""
    assert result["v2"]["productState"] == 0


def test_product_state_json_is_signed_32_bit():
    state = 0xFFFF1000
    info = SecurityInfo(version="v2", v2=V2Info(product_state=state))
    value = info.to_json()["v2"]["productState"]
    assert value < 0
    assert value % (1 << 32) == state


def test_sets_json_keys_and_order():
    av = SecurityInfo(display_name="A", version="v2", v2=decode_product_state(0x041000))
    fw = SecurityInfo(display_name="F", version="v2", v2=decode_product_state(0x011000))
    result = security_info_sets_json([av], [], [fw])
    assert list(result) == ["AntiVirusInfo", "AntiSpywareInfo", "FirewallInfo"]
    assert result["AntiSpywareInfo"] == []
    assert result["AntiVirusInfo"] == [av.to_json()]
    assert result["FirewallInfo"][0]["v2"]["securityProvider"] == "WSC_SECURITY_PROVIDER_FIREWALL"