import time

from chatroom.client import MAX_MESSAGE_LENGTH, MAX_USERNAME_LENGTH, ChatClient, ChatView
from chatroom.models import SYSTEM_USER_ID, Message, User


def message_payload(text, user_id, username="alice"):
    return Message(text=text, username=username, user_id=user_id).to_payload()


class TestChatView:

    def test_history_replaces_messages(self):
        view = ChatView()
        view.messages.append(Message.system("old"))
        view.on_chat_history([message_payload("hi", "sid-a")])

        assert [m.text for m in view.messages] == ["hi"]

    def test_receive_message_reports_foreign_messages(self):
        view = ChatView()
        view.own_id = "sid-a"

        assert view.on_receive_message(message_payload("mine", "sid-a")) is False
        assert view.on_receive_message(message_payload("yours", "sid-b", "bob")) is True
        assert view.is_own(view.messages[0])

    def test_join_and_leave_become_system_messages(self):
        view = ChatView()
        bob = User(id="sid-b", username="bob").to_payload()
        view.on_user_joined(bob)
        view.on_user_left(bob)

        assert [m.text for m in view.messages] == ["bob joined the chat", "bob left the chat"]
        assert all(m.user_id == SYSTEM_USER_ID and view.is_system(m) for m in view.messages)
        assert not view.is_system(Message(text="hi", username="alice", user_id="sid-a"))

    def test_users_update(self):
        view = ChatView()
        view.on_users_update([User(id="sid-a", username="alice").to_payload()])
        assert view.users[0].username == "alice"
        assert view.users[0].is_online

    def test_typing_label(self):
        view = ChatView()
        assert view.typing_label() is None
        view.on_user_typing(["alice"])
        assert view.typing_label() == "alice is typing..."
        view.on_user_typing(["alice", "bob"])
        assert view.typing_label() == "2 people are typing..."


class TestChatClient:

    def test_connect_tracks_status_and_own_id(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio)
        client.connect()

        assert client_sio.connected_to == "http://localhost:3001"
        assert client.view.connected
        assert client.view.own_id == "client-sid"

        client_sio.trigger("disconnect", "transport close")
        assert not client.view.connected

    def test_join_trims_and_skips_blank(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio)
        assert client.join("alice") is False  # ещё не подключены

        client.connect()
        assert client.join("   ") is False
        assert client.join("  alice ") is True
        assert client_sio.emitted == [("join", {"username": "alice"})]

    def test_send_caps_length_and_stops_typing(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio)
        client.connect()
        client.typing_start()
        client.typing_start()

        assert client.send("x" * 600) is True
        assert client.send("  ") is False

        events = [event for event, _ in client_sio.emitted]
        assert events == ["typing_start", "send_message", "typing_stop"]
        assert len(client_sio.emitted[1][1]["text"]) == MAX_MESSAGE_LENGTH

    def test_server_events_reach_view(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio)
        client.connect()

        client_sio.trigger("receive_message", message_payload("hi", "sid-b", "bob"))
        client_sio.trigger("user_typing", ["bob"])

        assert client.view.messages[0].text == "hi"
        assert client.view.typing_users == ["bob"]

    def test_join_caps_username(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio)
        client.connect()
        client.join("a" * 30)

        assert client_sio.emitted == [("join", {"username": "a" * MAX_USERNAME_LENGTH})]

    def test_typing_stops_after_idle(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio, typing_idle=0.05)
        client.connect()
        client.typing_start()
        time.sleep(0.3)

        assert client_sio.emitted == [("typing_start", None), ("typing_stop", None)]

    def test_each_keystroke_restarts_idle_timer(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio, typing_idle=0.4)
        client.connect()
        client.typing_start()
        time.sleep(0.25)
        client.typing_start()
        time.sleep(0.25)

        assert client_sio.emitted == [("typing_start", None)]
        client.typing_stop()

    def test_disconnect_cancels_idle_timer(self, client_sio):
        client = ChatClient("http://localhost:3001", sio=client_sio, typing_idle=0.05)
        client.connect()
        client.typing_start()
        client_sio.trigger("disconnect")
        time.sleep(0.2)

        assert client_sio.emitted == [("typing_start", None)]
