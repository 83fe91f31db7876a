from typing import Optional
from fastapi import APIRouter, File, Form, UploadFile
from ruralcare.schemas.assistant import InterpretResponse
from ruralcare.services.llm_service import llm_service
from ruralcare.services.upload_service import upload_service

router = APIRouter()


@router.post("/interpret-image", response_model=InterpretResponse)
async def interpret_image(
    question: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
):
    """Answer a medical question, about the uploaded image if one is attached."""
    if file is None or not file.filename:
        answer = await llm_service.interpret(question)
    else:
        _, content = await upload_service.save(file)
        answer = await llm_service.interpret(
            question,
            image=content,
            mime_type=file.content_type,
            filename=file.filename,
        )
    return InterpretResponse(answer=answer)
