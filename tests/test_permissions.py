import os
import subprocess
from unittest import mock

import pytest

from timetracker.permissions import (
    PermissionManager,
    PermissionStatus,
    PermissionValidationResult,
    auto_request_permissions,
    check_permissions,
)


def _completed(args, returncode=0, stdout=b""):
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=b"")


@pytest.mark.parametrize(
    "status, available, needs_action, description, icon",
    [
        (PermissionStatus.GRANTED, True, False, "已授予", "✅"),
        (PermissionStatus.DENIED, False, True, "被拒绝", "❌"),
        (PermissionStatus.NOT_DETERMINED, False, True, "未确定", "⚠️"),
        (PermissionStatus.RESTRICTED, False, True, "受限制", "🚫"),
        (PermissionStatus.NOT_REQUIRED, True, False, "不需要", "➖"),
        (PermissionStatus.UNKNOWN, False, False, "未知", "❓"),
    ],
)
def test_permission_status_methods(status, available, needs_action, description, icon):
    assert status.is_available() is available
    assert status.needs_user_action() is needs_action
    assert status.description() == description
    assert status.icon() == icon


def test_validation_result_helpers():
    result = PermissionValidationResult(
        available_permissions=[("A", PermissionStatus.GRANTED)],
        missing_permissions=[("B", PermissionStatus.DENIED)],
        warnings=[("C", PermissionStatus.UNKNOWN)],
    )
    assert not result.all_available()
    assert result.has_basic_permissions()
    assert result.permissions_needing_action() == [
        ("B", PermissionStatus.DENIED),
        ("C", PermissionStatus.UNKNOWN),
    ]


def test_empty_validation_result_is_all_available():
    result = PermissionValidationResult()
    assert result.all_available()
    assert not result.has_basic_permissions()
    assert result.permissions_needing_action() == []


def test_windows_permissions_are_granted():
    manager = PermissionManager(platform="win32")
    assert manager.check_all_permissions() == [("Window Access", PermissionStatus.GRANTED)]


def test_windows_report():
    manager = PermissionManager(platform="win32")
    assert manager.generate_permission_report() == (
        "=== 权限状态报告 ===\n\n"
        "✅ 可用权限:\n"
        "  ✅ Window Access: 已授予\n\n"
        "🎉 所有权限配置正确，应用可以正常运行！\n"
    )


def test_unknown_platform_has_no_permissions():
    manager = PermissionManager(platform="plan9")
    assert manager.check_all_permissions() == []
    assert manager.generate_permission_report() == (
        "=== 权限状态报告 ===\n\n🎉 所有权限配置正确，应用可以正常运行！\n"
    )


def test_linux_without_display_is_denied():
    manager = PermissionManager(platform="linux")
    with mock.patch.dict(os.environ, {}, clear=True):
        validation = manager.validate_permissions()
        report = manager.generate_permission_report()
    assert validation.missing_permissions == [("X11 Access", PermissionStatus.DENIED)]
    assert report == (
        "=== 权限状态报告 ===\n\n"
        "❌ 缺失权限:\n"
        "  ❌ X11 Access: 被拒绝\n\n"
        "❌ 存在权限问题，请按照指导进行配置\n"
    )


def test_linux_with_working_xdotool_is_granted():
    manager = PermissionManager(platform="linux")
    with mock.patch.dict(os.environ, {"DISPLAY": ":0"}), mock.patch(
        "subprocess.run", return_value=_completed(["xdotool"])
    ) as run:
        permissions = manager.check_all_permissions()
    assert permissions == [("X11 Access", PermissionStatus.GRANTED)]
    assert run.call_args.args[0] == ["xdotool", "getactivewindow"]


def test_linux_missing_xdotool_is_denied():
    manager = PermissionManager(platform="linux")
    with mock.patch.dict(os.environ, {"DISPLAY": ":0"}), mock.patch(
        "subprocess.run", side_effect=FileNotFoundError
    ):
        permissions = manager.check_all_permissions()
    assert permissions == [("X11 Access", PermissionStatus.DENIED)]


def test_linux_request_prints_install_help(capsys):
    manager = PermissionManager(platform="linux")
    with mock.patch.dict(os.environ, {}, clear=True):
        manager.request_permissions()
    out = capsys.readouterr().out
    assert "🐧 Linux 权限检查" in out
    assert "sudo apt-get install xdotool" in out


def test_macos_tcc_granted():
    manager = PermissionManager(platform="darwin")
    with mock.patch("subprocess.run", return_value=_completed(["sqlite3"], stdout=b"1\n")):
        permissions = manager.check_all_permissions()
    assert permissions == [
        ("Screen Recording", PermissionStatus.GRANTED),
        ("Accessibility", PermissionStatus.GRANTED),
    ]


def test_macos_tcc_undetermined_goes_to_warnings():
    manager = PermissionManager(platform="darwin")
    with mock.patch("subprocess.run", return_value=_completed(["sqlite3"], stdout=b"")):
        validation = manager.validate_permissions()
        report = manager.generate_permission_report()
    assert validation.warnings == [
        ("Screen Recording", PermissionStatus.NOT_DETERMINED),
        ("Accessibility", PermissionStatus.NOT_DETERMINED),
    ]
    assert report.endswith("⚠️ 基本权限已配置，但建议检查警告项目\n")


def test_macos_fallbacks_when_tcc_unavailable():
    def fake_run(args, **kwargs):
        if args[0] in ("sqlite3", "osascript"):
            raise FileNotFoundError(args[0])
        return _completed(args, returncode=1)

    manager = PermissionManager(platform="darwin")
    with mock.patch("subprocess.run", side_effect=fake_run):
        validation = manager.validate_permissions()
    assert validation.missing_permissions == [("Screen Recording", PermissionStatus.DENIED)]
    assert validation.warnings == [("Accessibility", PermissionStatus.UNKNOWN)]
    assert validation.available_permissions == []


def test_macos_request_all_granted(capsys):
    manager = PermissionManager(platform="darwin")
    with mock.patch("subprocess.run", return_value=_completed(["sqlite3"], stdout=b"1")):
        manager.request_permissions()
    out = capsys.readouterr().out
    assert "✅ 屏幕录制权限已授权" in out
    assert "🎉 所有权限已正确配置！" in out


def test_macos_request_denied_shows_manual_guide(capsys):
    manager = PermissionManager(platform="darwin")
    with mock.patch(
        "subprocess.run", return_value=_completed(["sqlite3"], stdout=b"0")
    ), mock.patch("subprocess.Popen", side_effect=OSError):
        manager.request_permissions()
    out = capsys.readouterr().out
    assert "❌ 屏幕录制权限状态: 被拒绝" in out
    assert "系统偏好设置 > 安全性与隐私 > 隐私 > 辅助功能" in out
    assert "🔄 重要提示:" in out


def test_windows_request(capsys):
    PermissionManager(platform="win32").request_permissions()
    out = capsys.readouterr().out
    assert "✅ Windows 平台无需额外权限配置" in out


def test_show_permission_status(capsys):
    PermissionManager(platform="win32").show_permission_status()
    assert capsys.readouterr().out == "\n=== 权限状态 ===\n  Window Access: ✅ 已授予\n\n"


def test_auto_request_permissions(capsys):
    assert auto_request_permissions() is True
    assert "跳过权限检查" in capsys.readouterr().out


def test_check_permissions_all_available(capsys):
    with mock.patch("sys.platform", "win32"):
        check_permissions()
    out = capsys.readouterr().out
    assert "✅ Window Access: 已授予" in out
    assert out.rstrip().endswith("🎉 所有权限配置正确，应用可以正常运行！")


def test_check_permissions_missing_runs_request(capsys):
    with mock.patch("sys.platform", "linux"), mock.patch.dict(os.environ, {}, clear=True):
        check_permissions()
    out = capsys.readouterr().out
    assert "❌ 权限配置不完整，请运行权限请求流程" in out
    assert "正在检查和请求必要权限..." in out