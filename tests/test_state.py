#!/usr/bin/env python3
"""test session state"""

from pysoundstructure.codec import (
    ChannelListUpdate,
    ChannelMuteUpdate,
    CrosspointMuteUpdate,
    PresetListUpdate,
    decode_line,
)
from pysoundstructure.state import SessionState, crosspoint_key


def apply_lines(state, *lines):
    for line in lines:
        event = decode_line(line)
        if event is not None:
            state.apply(event)


def test_lists_replaced_wholesale():
    """a new list replaces the old one"""
    state = SessionState()
    apply_lines(state, "virtual_channels=Ch1,Ch2, Ch3")
    assert state.get_virtual_channels() == ["Ch1", "Ch2", "Ch3"]
    apply_lines(state, "virtual_channels=Ch4")
    assert state.get_virtual_channels() == ["Ch4"]

    apply_lines(state, 'presets="Preset A","Preset B"')
    assert state.get_presets() == ["Preset A", "Preset B"]


def test_last_mute_wins():
    """the latest mute value for a channel is kept"""
    state = SessionState()
    apply_lines(state, 'mute "Main"=1', 'mute "Main"=0')
    assert state.get_channel_mute_status() == {"Main": 0}
    assert state.channel_mute("Main") == 0
    assert state.channel_mute("Other") is None


def test_apply_reports_change():
    """re-applying the same value is not a change"""
    state = SessionState()
    assert state.apply(ChannelMuteUpdate("Main", 1))
    assert not state.apply(ChannelMuteUpdate("Main", 1))
    assert state.apply(ChannelMuteUpdate("Main", 0))

    assert state.apply(ChannelListUpdate(("A", "B")))
    assert not state.apply(ChannelListUpdate(("A", "B")))
    assert state.apply(PresetListUpdate(("P",)))
    assert not state.apply(PresetListUpdate(("P",)))

    assert state.apply(CrosspointMuteUpdate("In1", "Out2", 1))
    assert not state.apply(CrosspointMuteUpdate("In1", "Out2", 1))


def test_crosspoint_key():
    """crosspoints are keyed input:output"""
    state = SessionState()
    apply_lines(state, 'crosspoint_mute "In1" "Out2"=1')
    assert state.get_crosspoint_mute_status() == {"In1:Out2": 1}
    assert crosspoint_key("In1", "Out2") == "In1:Out2"
    assert state.crosspoint_mute("In1", "Out2") == 1

    apply_lines(state, 'crosspoint_mute "In1"=0')
    assert state.get_crosspoint_mute_status() == {"In1:Out2": 1}


def test_unrecognised_lines_leave_state_unchanged():
    """noise from the device does not touch the mirror"""
    state = SessionState()
    apply_lines(state, "virtual_channels=A", 'mute "A"=1')
    before = (
        state.get_virtual_channels(),
        state.get_presets(),
        state.get_channel_mute_status(),
        state.get_crosspoint_mute_status(),
    )
    apply_lines(state, "", "error: unknown command", 'mute "A"', "ok")
    after = (
        state.get_virtual_channels(),
        state.get_presets(),
        state.get_channel_mute_status(),
        state.get_crosspoint_mute_status(),
    )
    assert before == after


def test_mutes_survive_channel_list_change():
    """mute entries for channels no longer listed are kept"""
    state = SessionState()
    apply_lines(state, "virtual_channels=A,B", 'mute "A"=1', "virtual_channels=B")
    assert state.get_channel_mute_status() == {"A": 1}


def test_accessors_return_copies():
    """callers cannot mutate the mirror through accessors"""
    state = SessionState()
    apply_lines(state, "virtual_channels=A", 'mute "A"=1')
    state.get_virtual_channels().append("B")
    state.get_channel_mute_status()["A"] = 0
    assert state.get_virtual_channels() == ["A"]
    assert state.get_channel_mute_status() == {"A": 1}


def test_clear():
    """clear empties everything"""
    state = SessionState()
    apply_lines(state, "virtual_channels=A", 'presets="P"', 'mute "A"=1', 'crosspoint_mute "A" "B"=1')
    state.clear()
    assert state.get_virtual_channels() == []
    assert state.get_presets() == []
    assert state.get_channel_mute_status() == {}
    assert state.get_crosspoint_mute_status() == {}
