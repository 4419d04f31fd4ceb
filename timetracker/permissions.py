"""Checks, reports and guidance for the permissions the tracker needs."""

from __future__ import annotations

import contextlib
import enum
import os
import subprocess
import sys
import tempfile
from dataclasses import dataclass, field

_TCC_DATABASE = "/Library/Application Support/com.apple.TCC/TCC.db"
_SCREEN_CAPTURE_SETTINGS = (
    "x-apple.systempreferences:com.apple.preference.security?Privacy_ScreenCapture"
)
_ACCESSIBILITY_SETTINGS = (
    "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"
)


class PermissionStatus(enum.Enum):
    GRANTED = "granted"
    DENIED = "denied"
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    NOT_REQUIRED = "not_required"
    UNKNOWN = "unknown"

    def is_available(self) -> bool:
        """Whether the permission can be used right now."""
        return self in (PermissionStatus.GRANTED, PermissionStatus.NOT_REQUIRED)

    def needs_user_action(self) -> bool:
        """Whether the user has to do something to obtain the permission."""
        return self in (
            PermissionStatus.DENIED,
            PermissionStatus.NOT_DETERMINED,
            PermissionStatus.RESTRICTED,
        )

    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def icon(self) -> str:
        return _ICONS[self]


_DESCRIPTIONS = {
    PermissionStatus.GRANTED: "已授予",
    PermissionStatus.DENIED: "被拒绝",
    PermissionStatus.NOT_DETERMINED: "未确定",
    PermissionStatus.RESTRICTED: "受限制",
    PermissionStatus.NOT_REQUIRED: "不需要",
    PermissionStatus.UNKNOWN: "未知",
}

_ICONS = {
    PermissionStatus.GRANTED: "✅",
    PermissionStatus.DENIED: "❌",
    PermissionStatus.NOT_DETERMINED: "⚠️",
    PermissionStatus.RESTRICTED: "🚫",
    PermissionStatus.NOT_REQUIRED: "➖",
    PermissionStatus.UNKNOWN: "❓",
}

PermissionEntry = tuple[str, PermissionStatus]


@dataclass
class PermissionValidationResult:
    """Permissions sorted into available, missing and uncertain."""

    available_permissions: list[PermissionEntry] = field(default_factory=list)
    missing_permissions: list[PermissionEntry] = field(default_factory=list)
    warnings: list[PermissionEntry] = field(default_factory=list)

    def all_available(self) -> bool:
        return not self.missing_permissions and not self.warnings

    def has_basic_permissions(self) -> bool:
        return bool(self.available_permissions)

    def permissions_needing_action(self) -> list[PermissionEntry]:
        return [*self.missing_permissions, *self.warnings]


class _CheckFailed(Exception):
    """A probing method could not reach a verdict."""


def _run(args: list[str]) -> subprocess.CompletedProcess | None:
    """Run a command and capture its output; None if it cannot be started."""
    try:
        return subprocess.run(args, capture_output=True, check=False)
    except OSError:
        return None


def _format_entries(entries: list[PermissionEntry]) -> str:
    return "".join(
        f"  {status.icon()} {name}: {status.description()}\n" for name, status in entries
    )


class PermissionManager:
    """Inspects and explains the permissions needed on the current platform."""

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform if platform is not None else sys.platform

    @property
    def _is_macos(self) -> bool:
        return self.platform == "darwin"

    @property
    def _is_linux(self) -> bool:
        return self.platform.startswith("linux")

    @property
    def _is_windows(self) -> bool:
        return self.platform in ("win32", "cygwin")

    def check_all_permissions(self) -> list[PermissionEntry]:
        """Return the name and status of every permission this platform needs."""
        if self._is_macos:
            return [
                ("Screen Recording", self._check_screen_recording_permission()),
                ("Accessibility", self._check_accessibility_permission()),
            ]
        if self._is_linux:
            return [("X11 Access", self._check_x11_access())]
        if self._is_windows:
            return [("Window Access", PermissionStatus.GRANTED)]
        return []

    def request_permissions(self) -> None:
        """Walk the user through granting whatever is missing."""
        print("正在检查和请求必要权限...")
        if self._is_macos:
            self._request_macos_permissions()
        elif self._is_linux:
            self._request_linux_permissions()
        elif self._is_windows:
            print("🪟 Windows 权限检查")
            print("✅ Windows 平台无需额外权限配置")

    def show_permission_status(self) -> None:
        """Print a short status line for each permission."""
        print("\n=== 权限状态 ===")
        for name, status in self.check_all_permissions():
            print(f"  {name}: {status.icon()} {status.description()}")
        print()

    def validate_permissions(self) -> PermissionValidationResult:
        """Sort the permissions by whether they are usable."""
        result = PermissionValidationResult()
        for name, status in self.check_all_permissions():
            if status.is_available():
                result.available_permissions.append((name, status))
            elif status in (PermissionStatus.DENIED, PermissionStatus.RESTRICTED):
                result.missing_permissions.append((name, status))
            else:
                result.warnings.append((name, status))
        return result

    def generate_permission_report(self) -> str:
        """Build a readable multi-line report of the permission state."""
        validation = self.validate_permissions()
        report = "=== 权限状态报告 ===\n\n"

        sections = (
            ("✅ 可用权限:\n", validation.available_permissions),
            ("❌ 缺失权限:\n", validation.missing_permissions),
            ("⚠️ 需要注意:\n", validation.warnings),
        )
        for heading, entries in sections:
            if entries:
                report += heading + _format_entries(entries) + "\n"

        if validation.all_available():
            report += "🎉 所有权限配置正确，应用可以正常运行！\n"
        elif not validation.missing_permissions:
            report += "⚠️ 基本权限已配置，但建议检查警告项目\n"
        else:
            report += "❌ 存在权限问题，请按照指导进行配置\n"
        return report

    # macOS

    def _check_screen_recording_permission(self) -> PermissionStatus:
        try:
            return self._check_tcc_permission("kTCCServiceScreenCapture")
        except _CheckFailed:
            return self._test_screen_capture()

    def _check_accessibility_permission(self) -> PermissionStatus:
        try:
            return self._check_tcc_permission("kTCCServiceAccessibility")
        except _CheckFailed:
            return self._test_accessibility()

    def _check_tcc_permission(self, service: str) -> PermissionStatus:
        query = (
            f"SELECT allowed FROM access WHERE service='{service}' "
            "AND client LIKE '%timetracker%' OR client LIKE '%Terminal%' "
            "OR client LIKE '%iTerm%';"
        )
        result = _run(["sqlite3", _TCC_DATABASE, query])
        if result is None or result.returncode != 0:
            raise _CheckFailed("无法检查TCC数据库")
        answer = result.stdout.decode("utf-8", errors="replace").strip()
        if answer == "1":
            return PermissionStatus.GRANTED
        if answer == "0":
            return PermissionStatus.DENIED
        return PermissionStatus.NOT_DETERMINED

    def _test_screen_capture(self) -> PermissionStatus:
        target = os.path.join(tempfile.gettempdir(), "timetracker_test.png")
        result = _run(["screencapture", "-t", "png", "-x", target])
        with contextlib.suppress(OSError):
            os.remove(target)
        if result is not None and result.returncode == 0:
            return PermissionStatus.GRANTED
        return PermissionStatus.DENIED

    def _test_accessibility(self) -> PermissionStatus:
        result = _run(
            [
                "osascript",
                "-e",
                'tell application "System Events" to get name of first process',
            ]
        )
        if result is None:
            return PermissionStatus.UNKNOWN
        if result.returncode == 0:
            return PermissionStatus.GRANTED
        return PermissionStatus.DENIED

    def _request_macos_permissions(self) -> None:
        print("🍎 macOS 权限配置向导")
        print("=" * 50)
        needs_restart = False

        print("\n📺 检查屏幕录制权限...")
        status = self._check_screen_recording_permission()
        if status is PermissionStatus.GRANTED:
            print("✅ 屏幕录制权限已授权")
        else:
            print(f"❌ 屏幕录制权限状态: {status.description()}")
            self._show_guide("屏幕录制", _SCREEN_CAPTURE_SETTINGS)
            needs_restart = True

        print("\n🔧 检查辅助功能权限...")
        status = self._check_accessibility_permission()
        if status is PermissionStatus.GRANTED:
            print("✅ 辅助功能权限已授权")
        else:
            print(f"❌ 辅助功能权限状态: {status.description()}")
            self._show_guide("辅助功能", _ACCESSIBILITY_SETTINGS)
            needs_restart = True

        if needs_restart:
            print("\n🔄 重要提示:")
            print("权限更改后，请重启 TimeTracker 应用以使更改生效。")
            print("您可以运行 'timetracker permissions check' 来验证权限状态。")
        else:
            print("\n🎉 所有权限已正确配置！")

    def _show_guide(self, pane: str, settings_url: str) -> None:
        print(f"\n📋 {pane}权限配置步骤:")
        print("1. 点击下方链接或手动打开 系统偏好设置")
        print(f"2. 导航到 安全性与隐私 > 隐私 > {pane}")
        print("3. 点击左下角的锁图标并输入管理员密码")
        print("4. 找到并勾选您的终端应用 (Terminal, iTerm2, 或 timetracker)")
        print("5. 如果没有看到应用，点击 '+' 按钮手动添加")
        try:
            subprocess.Popen(["open", settings_url])
        except OSError:
            print("\n⚠️ 无法自动打开系统偏好设置，请手动打开:")
            print(f"   系统偏好设置 > 安全性与隐私 > 隐私 > {pane}")
        else:
            print("\n🔗 正在打开系统偏好设置...")

    # Linux

    def _check_x11_access(self) -> PermissionStatus:
        if "DISPLAY" not in os.environ:
            return PermissionStatus.DENIED
        result = _run(["xdotool", "getactivewindow"])
        if result is not None and result.returncode == 0:
            return PermissionStatus.GRANTED
        return PermissionStatus.DENIED

    def _request_linux_permissions(self) -> None:
        print("🐧 Linux 权限检查")
        if self._check_x11_access() is PermissionStatus.GRANTED:
            print("✅ X11 访问权限正常")
            return
        print("⚠️  需要安装 xdotool 来获取窗口信息")
        print("请运行以下命令安装:")
        print("  Ubuntu/Debian: sudo apt-get install xdotool")
        print("  CentOS/RHEL: sudo yum install xdotool")
        print("  Arch Linux: sudo pacman -S xdotool")
        print("  Fedora: sudo dnf install xdotool")


def auto_request_permissions() -> bool:
    """Skip the interactive check; window detection falls back on its own."""
    print("🔐 跳过权限检查（简化模式）")
    return True


def check_permissions() -> None:
    """Print the permission report and start the request flow if needed."""
    manager = PermissionManager()
    print(manager.generate_permission_report())

    validation = manager.validate_permissions()
    if validation.all_available():
        print("🎉 所有权限配置正确，应用可以正常运行！")
    elif validation.has_basic_permissions():
        print("⚠️ 基本权限已配置，但建议完善所有权限")
        if validation.permissions_needing_action():
            print("运行 'timetracker permissions request' 来配置缺失的权限")
    else:
        print("❌ 权限配置不完整，请运行权限请求流程")
        manager.request_permissions()