import uvicorn
from stripbooth.config import settings

if __name__ == "__main__":
    print("🚀 Starting Stripbooth Server...")
    print(f"🌐 API available at: http://{settings.host}:{settings.port}/docs")
    print(f"🖼️  Frame assets are read from: {settings.frames_dir}")
    print("   Supply <frame_id>.png files there (landscape, portrait1-3, three1-5, four1-3);")
    print("   without them every strip uses the gradient layout")
    print(f"📁 Strips will be saved to: {settings.photos_dir}")
    print("\n📸 Capture flow:")
    print("   - Couples: 2 photos → landscape or portrait frame")
    print("   - Friends: 3 or 4 photos → portrait strip frame")
    print("   - Frames without detectable photo windows use fixed positions")
    print("\n🛑 Press Ctrl+C to stop the server\n")

    uvicorn.run(
        "stripbooth.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
