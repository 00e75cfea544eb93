"""宿主通知 API 测试 -- 进程外宿主投递 Host -> UI 通知"""

from httpx import AsyncClient


class TestHostEvents:
    async def test_backend_ready(self, client: AsyncClient, context):
        resp = await client.post("/api/host/events", json={"type": "backend-ready"})
        assert resp.status_code == 202
        assert resp.json()["handshake_state"] == "Ready"
        assert context.handshake.ready_reason == "host_ack"

    async def test_files_to_open_buffered(self, client: AsyncClient, context):
        resp = await client.post(
            "/api/host/events",
            json={"type": "files-to-open", "paths": ["/m/a.msg", "/m/b.txt"]},
        )
        assert resp.status_code == 202
        assert resp.json()["handshake_state"] == "Starting"
        assert context.intake.pending_count == 1

    async def test_open_file_now(self, client: AsyncClient, context, mail_dir):
        early = mail_dir("early.eml")
        forced = mail_dir("forced.msg")
        context.submit([str(early)])

        resp = await client.post(
            "/api/host/events",
            json={"type": "open-file-now", "paths": [str(forced)]},
        )
        await context.drain()

        assert resp.json()["handshake_state"] == "Ready"
        assert context.handshake.ready_reason == "force_open"
        names = [m.display_name for m in context.store.get_messages()]
        assert names == ["forced.msg", "early.eml"]

    async def test_new_files_available(self, client: AsyncClient, context, test_app, mail_dir):
        context.handshake.mark_ready()
        test_app.state.bridge.announce_files([str(mail_dir("late.eml"))])

        await client.post("/api/host/events", json={"type": "new-files-available"})
        await context.drain()

        assert [m.display_name for m in context.store.get_messages()] == ["late.eml"]

    async def test_unknown_type_rejected(self, client: AsyncClient):
        resp = await client.post("/api/host/events", json={"type": "reboot"})
        assert resp.status_code == 422
