"""Unit tests for the unified Dialog layer"""

from datetime import date

import pytest

from deskdialog.common.process import ExecResult
from deskdialog.common.types import Answer, Backend, Color, DialogOptions, FileSelectionOptions
from deskdialog.dialog import normalize, unified
from deskdialog.dialog.unified import Dialog


@pytest.fixture
def kdialog_dialog(runner):
    return Dialog(Backend.KDIALOG, runner=runner)


@pytest.fixture
def zenity_dialog(runner):
    return Dialog(Backend.ZENITY, runner=runner)


@pytest.fixture
def restore_default():
    """Restore the process-wide default Dialog after a test"""
    saved = unified._default
    yield
    unified._default = saved


class TestNormalize:
    """Pure normalization helpers"""

    @pytest.mark.parametrize(
        "label, expected",
        [("yes", Answer.YES), ("No", Answer.NO), ("Cancel", Answer.CANCEL), ("cancel", Answer.CANCEL)],
    )
    def test_answer_from_label(self, label, expected):
        """Test zenity labels map onto answers"""
        assert normalize.answer_fromLabel(label) is expected

    def test_menu_label(self):
        """Test 1-based tags resolve to labels"""
        assert normalize.menuLabel_get(["a", "b"], 2) == "b"
        assert normalize.menuLabel_get(["a", "b"], 3) is None
        assert normalize.menuLabel_get(["a", "b"], None) is None

    def test_checklist_round_trip(self):
        """Test label selections survive the tag encoding"""
        items = ["a", "b", "c"]
        built = normalize.checklistSelection_build(items, ["c", "a"])
        assert built == {1: True, 2: False, 3: True}
        assert normalize.checklistLabels_get(items, built) == ["a", "c"]

    def test_color_parsers(self):
        """Test both color encodings parse into Color"""
        assert normalize.colorFromKdialog_parse("10 20 30") == Color(10, 20, 30)
        assert normalize.colorFromZenity_parse("rgb(1,2,3)") == Color(1, 2, 3)
        assert normalize.colorFromZenity_parse("rgba(4,5,6,0.5)") == Color(4, 5, 6)
        assert normalize.colorFromZenity_parse(None) is None

    def test_calendar_parse(self):
        """Test day month year ordering"""
        assert normalize.calendarDate_parse("05 03 2024") == date(2024, 3, 5)
        assert normalize.calendarDate_parse("") is None

    def test_slider_default_is_floor_division(self):
        """Test the zenity scale starts at floor(min / max)"""
        assert normalize.sliderDefault_get(0, 100) == 0
        assert normalize.sliderDefault_get(50, 10) == 5
        assert normalize.sliderDefault_get(-5, 10) == -1
        assert normalize.sliderDefault_get(3, 0) == 3

    def test_value_clamp(self):
        """Test numeric results are clamped into range"""
        assert normalize.value_clamp(150, 0, 100) == 100
        assert normalize.value_clamp(-1, 0, 100) == 0
        assert normalize.value_clamp(None, 0, 100) is None


class TestNewPasswordConfirm:
    """Confirmation loop for new passwords"""

    def test_matching_first_time(self):
        """Test matching entries return the password"""
        captions = []

        def prompt(caption):
            captions.append(caption)
            return "abc|abc"

        assert normalize.newPassword_confirm(prompt) == "abc"
        assert captions == ["Enter a New Password"]

    def test_mismatch_then_match(self):
        """Test mismatch re-prompts with the mismatch caption"""
        replies = iter(["abc|xyz", "abc|abc"])
        captions = []

        def prompt(caption):
            captions.append(caption)
            return next(replies)

        assert normalize.newPassword_confirm(prompt) == "abc"
        assert captions == ["Enter a New Password", "Passwords did not match"]

    def test_password_containing_separator(self):
        """Test matching entries that contain the separator are confirmed"""
        replies = iter(["a|b|a|b", None])

        assert normalize.newPassword_confirm(lambda caption: next(replies)) == "a|b"

    def test_separator_mismatch_reprompts(self):
        """Test entries differing around the separator still count as a mismatch"""
        replies = iter(["a|b|a|c", None])
        captions = []

        def prompt(caption):
            captions.append(caption)
            return next(replies)

        assert normalize.newPassword_confirm(prompt) is None
        assert captions == ["Enter a New Password", "Passwords did not match"]

    def test_cancelled(self):
        """Test cancelling the form cancels the loop"""
        assert normalize.newPassword_confirm(lambda caption: None) is None


class TestBackendSelection:
    """Backend bookkeeping"""

    def test_none_backend_rejected(self, runner):
        """Test NONE is not a usable dialog backend"""
        with pytest.raises(ValueError):
            Dialog(Backend.NONE, runner=runner)

    def test_backend_set_by_name(self, zenity_dialog):
        """Test backend can be switched by name"""
        zenity_dialog.backend_set("kdialog")
        assert zenity_dialog.backend is Backend.KDIALOG

    def test_override_bypasses_detection(self, restore_default):
        """Test override sets the default backend without probing"""
        unified._default = None
        unified.preferredBackend_override(Backend.KDIALOG)
        assert unified.preferredBackend_get() is Backend.KDIALOG
        unified.preferredBackend_override("zenity")
        assert unified.preferredBackend_get() is Backend.ZENITY

    def test_detected_create_uses_probe(self, runner):
        """Test detection runs through the supplied runner"""
        runner.reply(0, "kdialog: /usr/bin/kdialog\n").reply(0, "zenity:\n")
        dialog = Dialog.detected_create(runner)
        assert dialog.backend is Backend.KDIALOG


class TestQuestions:
    """Questions behave the same on both backends"""

    @pytest.mark.parametrize(
        "code, expected", [(0, Answer.YES), (1, Answer.NO), (2, Answer.CANCEL)]
    )
    def test_kdialog_three_way(self, kdialog_dialog, runner, code, expected):
        """Test kdialog exit codes map onto answers"""
        runner.reply(code)
        assert kdialog_dialog.yesNoCancel_ask("Save?") is expected

    @pytest.mark.parametrize(
        "code, stdout, expected",
        [(0, "", Answer.YES), (1, "", Answer.NO), (5, "", Answer.CANCEL), (1, "Cancel\n", Answer.CANCEL)],
    )
    def test_zenity_three_way(self, zenity_dialog, runner, code, stdout, expected):
        """Test zenity extra button label maps onto cancel"""
        runner.reply(code, stdout)
        assert zenity_dialog.yesNoCancel_ask("Save?") is expected
        assert runner.last_args[-2:] == ["--extra-button", "Cancel"]

    def test_zenity_yes_no(self, zenity_dialog, runner):
        """Test zenity question returns True for yes"""
        runner.reply(0).reply(1)
        assert zenity_dialog.yesNo_ask("Ok?") is True
        assert zenity_dialog.yesNo_ask("Ok?") is False

    def test_zenity_warning_yes_no_labels(self, zenity_dialog, runner):
        """Test warning questions relabel zenity buttons"""
        runner.reply(1, "No\n")
        assert zenity_dialog.warningYesNo_ask("Delete?") is False
        assert runner.last_args == [
            "--warning",
            "--text",
            "Delete?",
            "--ok-label",
            "Yes",
            "--extra-button",
            "No",
        ]

    def test_kdialog_warning_uses_sorry(self, kdialog_dialog, runner):
        """Test kdialog warnings are sorry boxes"""
        assert kdialog_dialog.warning_show("Careful", DialogOptions(title="T")) is True
        assert runner.last_args == ["--sorry", "Careful", "--title", "T"]

    def test_zenity_geometry(self, zenity_dialog, runner):
        """Test unified geometry maps onto zenity width and height"""
        zenity_dialog.info_show("Hi", DialogOptions(geometry=(200, 100)))
        assert runner.last_args == ["--info", "--text", "Hi", "--width", "200", "--height", "100"]


class TestPrompts:
    """Prompts"""

    def test_zenity_password_uses_text_as_title(self, zenity_dialog, runner):
        """Test zenity password caption goes into the title"""
        runner.reply(0, "pw\n")
        assert zenity_dialog.password_prompt("Unlock") == "pw"
        assert runner.last_args == ["--password", "--title", "Unlock"]

    def test_zenity_new_password_retries(self, zenity_dialog, runner):
        """Test mismatching entries ask again"""
        runner.reply(0, "abc|xyz\n").reply(0, "abc|abc\n")
        assert zenity_dialog.newPassword_prompt("Account") == "abc"
        assert len(runner.calls) == 2
        assert "Passwords did not match" in runner.calls[1][1]

    def test_zenity_new_password_cancelled(self, zenity_dialog, runner):
        """Test cancelling the form returns None"""
        runner.reply(1)
        assert zenity_dialog.newPassword_prompt("Account") is None

    def test_kdialog_new_password_native(self, kdialog_dialog, runner):
        """Test kdialog confirms the password itself"""
        runner.reply(0, "abc\n")
        assert kdialog_dialog.newPassword_prompt("Account") == "abc"
        assert runner.last_args == ["--newpassword", "Account"]

    def test_zenity_text_box_input_seeds_file(self, zenity_dialog, runner):
        """Test initial text is passed through a temporary file"""
        seen = {}

        def handler(command, args):
            path = args[args.index("--filename") + 1]
            with open(path) as seed:
                seen["text"] = seed.read()
            return ExecResult(0, "edited\n", "")

        runner.handler = handler
        assert zenity_dialog.textBoxInput_prompt("Notes", "draft") == "edited"
        assert seen["text"] == "draft"


class TestSelections:
    """Menus, checklists and combos"""

    def test_kdialog_menu_returns_label(self, kdialog_dialog, runner):
        """Test kdialog tags are resolved to labels"""
        runner.reply(0, "2\n")
        assert kdialog_dialog.menu_select("Pick", ["a", "b"]) == "b"

    def test_zenity_menu_radiolist(self, zenity_dialog, runner):
        """Test zenity menu uses a headerless radiolist"""
        runner.reply(0, "a\n")
        assert zenity_dialog.menu_select("Pick", ["a", "b"]) == "a"
        assert "--radiolist" in runner.last_args
        assert "--hide-header" in runner.last_args

    def test_zenity_menu_cancelled(self, zenity_dialog, runner):
        """Test cancelled menu returns None"""
        runner.reply(1)
        assert zenity_dialog.menu_select("Pick", ["a"]) is None

    def test_kdialog_checklist_labels(self, kdialog_dialog, runner):
        """Test checklist returns checked labels"""
        runner.reply(0, '"1" "3"\n')
        assert kdialog_dialog.checklist_select("Pick", ["a", "b", "c"], ["b"]) == ["a", "c"]
        assert runner.last_args[2:] == ["1", "a", "off", "2", "b", "on", "3", "c", "off"]

    def test_zenity_checklist_labels(self, zenity_dialog, runner):
        """Test zenity checklist rows and newline separator"""
        runner.reply(0, "a\nc\n")
        assert zenity_dialog.checklist_select("Pick", ["a", "b", "c"], ["c"]) == ["a", "c"]
        args = runner.last_args
        assert args[args.index("--column") :][4:10] == ["FALSE", "a", "FALSE", "b", "TRUE", "c"]
        assert args[-2:] == ["--separator", "\n"]

    def test_zenity_combo_form(self, zenity_dialog, runner):
        """Test zenity combo uses a form combo field"""
        runner.reply(0, "b\n")
        assert zenity_dialog.combo_select("Pick", ["a", "b"]) == "b"
        assert runner.last_args == ["--forms", "--add-combo", "Pick", "--combo-values", "a|b"]


class TestFileSelection:
    """File pickers"""

    def test_multiple_and_save_rejected(self, kdialog_dialog, runner):
        """Test conflicting modes fail before any process runs"""
        with pytest.raises(ValueError):
            kdialog_dialog.fileSelection_get(
                "/", mode=FileSelectionOptions(multiple=True, save=True)
            )
        assert runner.calls == []

    def test_kdialog_multiple_returns_list(self, kdialog_dialog, runner):
        """Test multiple paths come back as a list"""
        runner.reply(0, "/a\n/b\n")
        assert kdialog_dialog.fileSelection_get(
            "/", mode=FileSelectionOptions(multiple=True)
        ) == ["/a", "/b"]

    def test_kdialog_directory(self, kdialog_dialog, runner):
        """Test directory mode uses the directory picker"""
        runner.reply(0, "/srv\n")
        assert kdialog_dialog.fileSelection_get("/", mode=FileSelectionOptions(directory=True)) == "/srv"
        assert runner.last_args == ["--getexistingdirectory", "/"]

    def test_zenity_single_path(self, zenity_dialog, runner):
        """Test single selection returns a string"""
        runner.reply(0, "/a\n")
        assert zenity_dialog.fileSelection_get("/") == "/a"


class TestValues:
    """Color, slider and calendar"""

    def test_color_default_wrong_size(self, kdialog_dialog, runner):
        """Test malformed default is rejected before any process runs"""
        with pytest.raises(ValueError, match="size 3"):
            kdialog_dialog.color_get([1, 2])
        assert runner.calls == []

    def test_kdialog_color(self, kdialog_dialog, runner):
        """Test kdialog color default is hex and output parsed"""
        runner.reply(0, "1 2 3\n")
        assert kdialog_dialog.color_get([255, 0, 16]) == Color(1, 2, 3)
        assert runner.last_args == ["--getcolor", "--format", "%d %d %d", "--default", "#FF0010"]

    def test_zenity_color(self, zenity_dialog, runner):
        """Test zenity color default is rgb() and output parsed"""
        runner.reply(0, "rgb(4,5,6)\n")
        assert zenity_dialog.color_get([1, 2, 3]) == Color(4, 5, 6)
        assert runner.last_args == ["--color-selection", "--color", "rgb(1,2,3)"]

    def test_color_cancelled(self, zenity_dialog, runner):
        """Test cancelled color picker returns None"""
        runner.reply(1)
        assert zenity_dialog.color_get() is None

    def test_zenity_slider_initial_value(self, zenity_dialog, runner):
        """Test zenity scale starts at min // max and result is clamped"""
        runner.reply(0, "500\n")
        assert zenity_dialog.slider_get("Vol", 20, 100, 5) == 100
        args = runner.last_args
        assert args[args.index("--value") + 1] == "0"

    def test_kdialog_slider_cancelled(self, kdialog_dialog, runner):
        """Test kdialog slider cancellation"""
        runner.reply(1)
        assert kdialog_dialog.slider_get("Vol", 0, 10, 1) is None

    def test_kdialog_calendar(self, kdialog_dialog, runner):
        """Test kdialog calendar success uses the inverted status"""
        runner.reply(1, "05 03 2024\n")
        assert kdialog_dialog.calendar_get("When?") == date(2024, 3, 5)

    def test_zenity_calendar(self, zenity_dialog, runner):
        """Test zenity calendar output parses to a date"""
        runner.reply(0, "05 03 2024\n")
        assert zenity_dialog.calendar_get("When?") == date(2024, 3, 5)
        assert runner.last_args == ["--calendar", "--text", "When?", "--date-format", "%d %m %Y"]


class TestNotifications:
    """Passive notifications"""

    def test_zenity_timeout_default(self, zenity_dialog, runner):
        """Test zenity notifications default to no timeout"""
        zenity_dialog.passiveNotification_show("Hi", 5)
        assert runner.spawned == [("zenity", ["--notification", "--text", "Hi", "--timeout", "0"])]

    def test_kdialog_popup(self, kdialog_dialog, runner):
        """Test kdialog passive popup carries the timeout"""
        kdialog_dialog.passiveNotification_show("Hi", 5)
        assert runner.spawned == [("kdialog", ["--passivepopup", "Hi", "5"])]
